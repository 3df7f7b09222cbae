# wadtools

A small toolbox for working with classic WAD game data:

- **WAD archives** (`wadtools.wad`): read the lump directory of a WAD file
  and total how much space maps, graphics, sounds, music and other data
  take up.
- **Level maps** (`wadtools.level`, `wadtools.mapreader`,
  `wadtools.geometry`): read the vertices, linedefs, segs, subsectors, BSP
  nodes, things and blockmap of each level, rebuild the implicit subsector
  polygons by walking the BSP tree, and clip each blockmap block's lines.
- **SVG drawings** (`wadtools.svg`): draw each level as a set of SVG files.
- **Sprite shading** (`wadtools.sprite`, `wadtools.palette`,
  `wadtools.colormap`): decode a column-based sprite, light it through a
  COLORMAP lightmap and a PLAYPAL palette, and write it as a 32-bit Targa
  image with a transparent border.
- **Targa images** (`wadtools.targa`, `wadtools.targa_ops`): read and write
  TGA files (raw and RLE; true-color, mono and color-mapped), and flip,
  unmap, desaturate and convert the depth of them in place.
- **Row-majorize** (`wadtools.rowmajorize`): transpose the pixels of a
  24-bit TGA image.

## Installation

```
pip install .
```

No third-party libraries are needed. Install the `test` extra to run the
tests with pytest.

## Commands

### wad-explorer

```
wad-explorer DOOM.WAD
```

Prints one line per lump category (`MAP`, `GFX`, `SOUND`, `MUSIC`,
`OTHERS`, numbered 0 to 4) in the form `index:bytes(percent%)`, then writes
nine SVG files per level into the current directory, for example
`E1M1_nodes.svg`, `E1M1_special_lines.svg`, `E1M1_sides.svg`,
`E1M1_segs.svg`, `E1M1_subsectors.svg`, `E1M1_fab.svg`,
`E1M1_blockmap.svg`, `E1M1_blueprint.svg` and `E1M1_bsptree.svg`. On a
missing argument or an unreadable archive it prints a message to standard
error and exits with status 1.

### sprite-shader

```
sprite-shader HEADA1.lmp
```

Reads `PLAYPAL.lump` and `COLORMAP.lmp` from the current directory and
writes 32 shaded copies of the sprite, `cacodemon1.tga` to
`cacodemon32.tga`, one per lightmap.

### rowmajorize

```
rowmajorize picture.tga
```

Reads a 24-bit TGA image and writes it with its pixels transposed to
`out.tga`; the header is copied unchanged.

## Library use

```python
from wadtools.wad import open_wad
from wadtools.mapreader import MapReader
from wadtools.svg import SvgRenderer

archive = open_wad("DOOM.WAD")
print(archive.categories())

reader = MapReader()
reader.parse(archive.lumps)
SvgRenderer("out").render(reader.maps)
```

`SvgRenderer` takes an output directory and a `random.Random`; the fill
colors of `render_nodes_and_subsectors` and the line stretch of
`render_blueprint` are drawn from it, so pass a seeded generator for
repeatable output.

```python
from wadtools import targa, targa_ops

image = targa.read("picture.tga")
targa_ops.flip_vert(image)
targa_ops.desaturate_rec_709(image)
targa.write("grey.tga", image)
```

```python
from wadtools.palette import load_palette
from wadtools.colormap import load_colormap
from wadtools.sprite import load_sprite
from wadtools.shader_cli import generate_shades

generate_shades(
    load_sprite("HEADA1.lmp"),
    load_palette("PLAYPAL.lump"),
    load_colormap("COLORMAP.lmp"),
    prefix="head",
    directory="shades",
)
```

Targa failures are raised as `wadtools.targa.TgaError`, which carries an
`ErrorCode` in its `code` attribute; `error_message(code)` gives its text.
Malformed WAD, level, palette, colormap and sprite data raise `ValueError`
(or `IndexError` for references to missing entries).

## Limits

- Sidedefs, sectors and the reject table are only checked by lump name;
  their contents are not read, so drawings carry no textures, heights or
  light levels.
- The Targa reader ignores the extension and developer areas; the writer
  always appends the standard footer.
- Nothing is drawn on screen: levels are only written out as SVG files.