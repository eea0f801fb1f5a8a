# tinyraster

A small CPU software renderer. It reads Wavefront OBJ models, draws them into
TGA images and writes the images to disk. It covers four stages of a classic
rasterization pipeline:

- **Wireframe** (`tinyraster.drawline`): every triangle edge drawn with a
  simple interpolating line algorithm.
- **Flat fill** (`tinyraster.flatfill`): triangles filled by signed-area
  tests; clockwise or very small triangles are skipped.
- **Z-buffer** (`tinyraster.zbuffer`): depth-tested filling, with the depth
  buffer written out as a grayscale image.
- **Projection** (`tinyraster.projection`): model, view and perspective
  projection matrices, plus perspective-correct texture mapping from a TGA
  texture.

## Installation

```
pip install .
```

The only runtime dependency is `numpy`. To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line use

Each rendering stage has its own command. All of them take the model file as
an optional positional argument and `--width` / `--height` options.

```
tinyraster-drawline  [OBJ] [-o OUTPUT] [--width W] [--height H]
tinyraster-flatfill  [OBJ] [-o OUTPUT] [--width W] [--height H]
tinyraster-zbuffer   [OBJ] [--frame FRAME] [--depth DEPTH] [--width W] [--height H]
tinyraster-projection [OBJ] [--texture TGA] [--frame FRAME] [--depth DEPTH] [--width W] [--height H]
```

- `tinyraster-drawline` writes a red wireframe to `output.tga` (default
  1000x1500), fitting the model's x/y extent to the image.
- `tinyraster-flatfill` writes a white filled silhouette to `output.tga`
  (default 1960x2180).
- `tinyraster-zbuffer` normalizes the model (x and y to [-1, 1], z to
  [0, 1]), then writes the colour image to `frame.tga` and the depth image to
  `buffer.tga` (default 1000x1500). Larger z is kept as nearer.
- `tinyraster-projection` renders the model in perspective with a texture and
  writes `frame.tga` and `buffer.tga` (default 1000x1000). If the texture
  cannot be read, it prints a message to standard error and renders with an
  empty texture, so the frame stays black.

The default model is `../obj/delisha.obj` (`../obj/youda.obj` and
`../obj/youda.tga` for the projection command), relative to the current
directory. All images are written run-length encoded with the origin at the
bottom-left corner of the picture.

## Library use

### Images

```python
from tinyraster.tgaimage import TGAImage, TGAColor, Format

image = TGAImage(100, 100, Format.RGB)
red = TGAColor.rgba(255, 0, 0, 255)
image.set(10, 20, red)
image.flip_vertically()
image.write("out.tga", rle=True)

loaded = TGAImage.read("out.tga")
print(loaded.get(10, 79).r)      # 255
```

`TGAImage` reads and writes uncompressed and run-length encoded TGA files in
grayscale, RGB and RGBA (`Format.GRAYSCALE`, `Format.RGB`, `Format.RGBA`).
`to_bytes` and `from_bytes` do the same in memory. It also offers `copy`,
`flip_horizontally`, `flip_vertically`, nearest-neighbour `scale`, `clear`,
`buffer` (the shared pixel bytes) and the read-only `width`, `height` and
`bytespp` properties.

`get` returns a blank colour and `set` returns `False` for coordinates outside
the image. Malformed TGA data raises `TGAError`; so does encoding an image
whose size does not fit the TGA header. Files that cannot be opened raise
`OSError`.

`TGAColor` stores four bytes in B, G, R, A order; build one with
`TGAColor.rgba`, `TGAColor.from_value` or `TGAColor.from_bytes`, and read it
back through `r`, `g`, `b`, `a` and `val`.

### Models

```python
from tinyraster.model import Model

model = Model.load("head.obj")
print(model.nverts(), model.nfaces())
print(model.bounding_box())
model.normalized()               # x and y to [-1, 1], z to [0, 1]
```

`Model.from_lines` parses OBJ text given as a string or an iterable of lines.
Only `v`, `vn`, `vt` and `f` lines are read, and face corners must be written
as `v/vt/vn`. Each face corner becomes a zero-based `FaceVertex` with `vert`,
`uv` and `normal` indices; `face_vertices` returns a face's positions.

### Rendering

```python
from tinyraster.drawline import render_wireframe
from tinyraster.tgaimage import TGAColor

image = render_wireframe(model, 800, 800, TGAColor.rgba(255, 255, 255, 255))
image.write("wire.tga", rle=True)
```

- `tinyraster.drawline`: `line` and `render_wireframe`.
- `tinyraster.flatfill`: `signed_triangle_area`, `triangle` and
  `render_silhouette`.
- `tinyraster.zbuffer`: `compute_barycentric_2d`, `triangle`, `depth_image`
  and `render_depth`, which expects a normalized model and returns
  `(frame, depth_image)`.
- `tinyraster.projection`: `model_matrix`, `view_matrix`,
  `projection_matrix`, `viewport_matrix` (as numpy arrays) and `Rasterizer`,
  whose `draw(texture)` returns `(frame, depth_image)`. Its depth buffer keeps
  the smallest depth and `depth_image` shows nearer pixels brighter.

### Vectors

`tinyraster.geometry` has small `Vec2` and `Vec3` dataclasses with addition,
subtraction and scaling by a number; `Vec3 * Vec3` is the dot product and
`Vec3 ^ Vec3` the cross product.

## What it does not do

- There is no window or on-screen display; results only go to TGA files.
- There is no lighting or shading: faces are drawn in one colour or, in the
  projection stage, straight from the texture.
- The projection camera is fixed (eye at `(0, 0.7, 2.17)`, 75° field of view,
  near 0.8, far 3.0) and the model transform is the identity.
- OBJ files are read only for vertices, normals, texture coordinates and
  `v/vt/vn` faces; materials and other statements are ignored, and normals are
  loaded but not used in rendering.