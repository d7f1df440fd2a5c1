# fotopaint

A raster photo editing library built on NumPy, SciPy and Pillow. It keeps a
numbered set of open photos, applies painting tools to them one mouse-style
event at a time, and provides the drawing, smoothing and warping primitives
those tools rest on.

Images are NumPy arrays of shape `(height, width, 3)` with `uint8` values in
BGR channel order. Sizes passed to functions are `(width, height)`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## The photo workspace: `fotopaint.store`

`PhotoStore` holds a fixed number of slots (100 by default). Each slot holds
at most one `Photo`, which carries a name, a file path, the image, a
selection (`Rect`), a focus order and a modified flag. The most recently
focused photo is the active one.

```python
from fotopaint.store import PhotoStore

store = PhotoStore()
slot = store.first_free()                       # None when every slot is taken
store.create_blank(slot, 640, 480, (255, 255, 255))
store.focus(slot)
print(store.active(), store.status_text())      # "1 fotos abiertas, 1 modificadas."
store.save(slot, "blank.png")
store.close(slot)
```

Other members: `create_from_image`, `open` (reads a file), `find` (slot by
name), `counts` (open and modified photos), `select_all`, `close_all`, and
indexing, iteration over used slots, `len` and `in`. Misusing a slot — an
empty one, a taken one, one out of range — raises `PhotoError`, as does a
file that cannot be read or written.

`load_image(path)` and `save_image(path, image)` read and write image files
as BGR arrays; the format follows the file extension.

`Rect(x, y, width, height).clipped(width, height)` returns the part of a
rectangle that lies inside an image.

## Raster primitives: `fotopaint.raster`

- Drawing in place: `draw_circle`, `draw_line`, `draw_rectangle`,
  `draw_ellipse` (a negative thickness fills circles, rectangles and
  ellipses).
- Filters: `box_blur`, `gaussian_blur`, `median_blur`, `sobel`, `to_gray`,
  `saturate` (round and clamp to 0–255).
- Geometry: `resize` (`"nearest"`, `"linear"` or `"cubic"`), `warp_affine`,
  `perspective_matrix` and `warp_perspective`.

```python
import numpy as np
from fotopaint.raster import draw_circle, gaussian_blur, perspective_matrix, warp_perspective

image = np.zeros((200, 300, 3), dtype=np.uint8)
draw_circle(image, (150, 100), 40, (0, 0, 255), -1)
soft = gaussian_blur(image, (9, 9))

corners = [(0, 0), (300, 0), (300, 200), (0, 200)]
target = [(30, 20), (270, 0), (270, 180), (30, 180)]
matrix = perspective_matrix(corners, target)
projected = warp_perspective(soft, matrix, np.zeros_like(soft))
```

## Painting: `fotopaint.tools`

`Editor` applies the current `Tool` with the current `Brush` (radius, BGR
color, softness) to a photo in a store. `handle` returns the image the
photo's window should now show, or `None` when nothing needs redrawing.

```python
from fotopaint.tools import Brush, Editor, MouseEvent, Tool

editor = Editor(store, Brush(radius=4, color=(0, 0, 255), softness=0))
editor.set_tool(Tool.LINE)
editor.handle(slot, MouseEvent.LEFT_DOWN, 10, 10, True)
editor.handle(slot, MouseEvent.MOVE, 120, 60, True)    # preview only
editor.handle(slot, MouseEvent.LEFT_UP, 200, 120)      # draws into the photo
```

Tools: `POINT`, `LINE`, `SELECTION`, `RECTANGLE`, `ELLIPSE`, `RAINBOW`
(colors from `RainbowColors`), `CONTINUOUS` (a freehand stroke; call
`reset_stroke` to start a new one) and `SOFTEN` (Gaussian smoothing under the
brush). The selection tool sets the photo's `roi`. A `FOCUS` event brings the
photo to the front; a `CLOSE` event closes it, first saving it if it is
modified and the optional `confirm_save` callback returns true. Setting
`enabled` to false makes the editor ignore every event except `CLOSE`.

`soft_blend` and `clip_selection` are the helpers the tools use for
soft-edged painting and for selection rectangles.

## Dialog helpers: `fotopaint.session`

Small functions for driving interactive adjustments: `smoothing_kernel`
(slider value to odd kernel size), `pinch_degree`,
`default_perspective_points`, `nearest_corner` (which handle a click grabs),
`scale_points`, and `blend_partner` (the active photo and the most recent
other one).

## What this package does not do

There is no command-line program and no windowed interface: nothing is
displayed, and the caller decides what to do with the images `Editor.handle`
returns. The image adjustments and effects a photo editor usually offers on
top of these primitives — inversion, rotation, brightness/contrast/gamma,
histograms and histogram stretching, colour scales, emboss, pinch/stretch,
hue/saturation/lightness, Fourier spectrum — are not included, nor is any
camera or video capture.