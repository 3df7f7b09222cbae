[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wadtools"
version = "0.1.0"
description = "Tools for WAD archives, Doom level maps, sprite shading and Targa images"
requires-python = ">=3.10"
dependencies = []
keywords = ["wad", "doom", "targa", "tga", "svg", "bsp", "sprite", "palette"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wad-explorer = "wadtools.wadexplorer:main"
sprite-shader = "wadtools.shader_cli:main"
rowmajorize = "wadtools.rowmajorize:main"

[tool.hatch.build.targets.wheel]
packages = ["wadtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
