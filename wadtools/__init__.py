"""Tools for WAD archives, level maps, SVG drawings, sprite shading and Targa images."""

__version__ = "0.1.0"

__all__ = [
    "colormap",
    "geometry",
    "level",
    "mapreader",
    "palette",
    "rowmajorize",
    "shader_cli",
    "sprite",
    "svg",
    "targa",
    "targa_ops",
    "things",
    "wad",
    "wadexplorer",
]