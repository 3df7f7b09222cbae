import struct

from wadtools import targa
from wadtools.colormap import COLORMAP_SIZE, parse_colormap
from wadtools.palette import PLAYPAL_SIZE, parse_palette
from wadtools.shader_cli import SHADE_COUNT, generate_shades, main
from wadtools.sprite import parse_sprite


def sprite_bytes():
    header = struct.pack("<HHHH", 1, 2, 0, 0)
    column = bytes([0, 2, 4, 5, 6, 7, 255])
    return header + struct.pack("<I", 12) + column


def palette_bytes():
    return bytes(pos % 256 for pos in range(PLAYPAL_SIZE))


def colormap_bytes():
    return bytes((row * 3 + col) % 256 for row in range(34) for col in range(256))


def test_generate_shades_writes_every_level(tmp_path):
    sprite = parse_sprite(sprite_bytes())
    palette = parse_palette(palette_bytes())
    colormap = parse_colormap(colormap_bytes())
    paths = generate_shades(sprite, palette, colormap, "shade", tmp_path)
    assert len(paths) == SHADE_COUNT
    assert [p.name for p in paths] == [f"shade{i}.tga" for i in range(1, SHADE_COUNT + 1)]
    assert all(p.exists() for p in paths)


def test_each_shade_uses_its_lightmap(tmp_path):
    sprite = parse_sprite(sprite_bytes())
    palette = parse_palette(palette_bytes())
    colormap = parse_colormap(colormap_bytes())
    paths = generate_shades(sprite, palette, colormap, "shade", tmp_path)
    for level in (0, 7, SHADE_COUNT - 1):
        image = targa.read(paths[level])
        assert bytes(image.image_data) == sprite.render(palette, colormap.lightmap(level))


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().out


def test_main_without_palette_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["sprite.lmp"]) == 1
    assert not (tmp_path / "cacodemon1.tga").exists()


def test_main_rejects_bad_colormap(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "PLAYPAL.lump").write_bytes(palette_bytes())
    (tmp_path / "COLORMAP.lmp").write_bytes(bytes(COLORMAP_SIZE - 1))
    (tmp_path / "sprite.lmp").write_bytes(sprite_bytes())
    assert main(["sprite.lmp"]) == 1


def test_main_writes_shades(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "PLAYPAL.lump").write_bytes(palette_bytes())
    (tmp_path / "COLORMAP.lmp").write_bytes(colormap_bytes())
    (tmp_path / "sprite.lmp").write_bytes(sprite_bytes())
    assert main(["sprite.lmp"]) == 0
    assert (tmp_path / f"cacodemon{SHADE_COUNT}.tga").exists()
    assert not (tmp_path / f"cacodemon{SHADE_COUNT + 1}.tga").exists()