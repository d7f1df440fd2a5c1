"""Mouse-driven painting tools acting on the photos of a store."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .raster import (
    box_blur,
    draw_circle,
    draw_ellipse,
    draw_line,
    draw_rectangle,
    gaussian_blur,
    saturate,
)
from .store import Photo, PhotoStore, Rect

_WHITE = (255, 255, 255)
_SELECTION_FIXED = (0, 0, 255)
_SELECTION_DRAGGING = (0, 255, 255)


class Tool(enum.Enum):
    """The painting tools a mouse gesture can drive."""

    POINT = "point"
    LINE = "line"
    SELECTION = "selection"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    RAINBOW = "rainbow"
    CONTINUOUS = "continuous"
    SOFTEN = "soften"


class MouseEvent(enum.Enum):
    """What happened in a photo window."""

    MOVE = "move"
    LEFT_DOWN = "left_down"
    LEFT_UP = "left_up"
    FOCUS = "focus"
    CLOSE = "close"


@dataclass
class Brush:
    """Brush radius, BGR color and edge softness shared by all tools."""

    radius: int = 10
    color: tuple = (255, 255, 255)
    softness: int = 10


class RainbowColors:
    """An endless cycle of saturated BGR colors, moving one step per value."""

    _STEP = 8

    def __init__(self):
        self._color = [0.0, 0.0, 255.0]
        self._state = 0

    def __iter__(self):
        return self

    def __next__(self):
        c, step = self._color, self._STEP
        state = self._state
        if state == 0:
            c[1] += step
            if c[1] >= 255:
                self._state = 1
        elif state == 1:
            c[2] -= step
            if c[2] <= 0:
                self._state = 2
        elif state == 2:
            c[0] += step
            if c[0] >= 255:
                self._state = 3
        elif state == 3:
            c[1] -= step
            if c[1] <= 0:
                self._state = 4
        elif state == 4:
            c[2] += step
            if c[2] >= 255:
                self._state = 5
        else:
            c[0] -= step
            if c[0] <= 0:
                self._state = 0
        return tuple(c)


def soft_blend(image, mask, color, softness):
    """Blend color into image in place, weighted by a blurred 0-255 mask."""
    weights = saturate(mask)
    if softness > 0:
        weights = box_blur(weights, (softness * 2 + 1, softness * 2 + 1))
    weights = weights.astype(np.float64)
    if image.ndim == 3:
        weights = weights[..., None]
        channels = image.shape[2]
    else:
        channels = 1
    values = np.resize(np.atleast_1d(np.asarray(color, dtype=np.float64)), channels)
    if image.ndim == 2:
        values = values[0]
    painted = saturate(values * weights / 255.0)
    kept = saturate(image.astype(np.float64) * (255.0 - weights) / 255.0)
    image[...] = saturate(painted.astype(np.int32) + kept.astype(np.int32))
    return image


def clip_selection(x0, y0, x1, y1, width, height):
    """The rectangle spanned by two corners, cut to an image of the given size."""
    left, top = min(x0, x1), min(y0, y1)
    rect_w = max(x0, x1) - left + 1
    rect_h = max(y0, y1) - top + 1
    left = max(left, 0)
    top = max(top, 0)
    if left + rect_w > width:
        rect_w = width - left
    if top + rect_h > height:
        rect_h = height - top
    return Rect(left, top, rect_w, rect_h)


class Editor:
    """Routes mouse events in photo windows to the current tool.

    handle() returns the image that the window should now show, or None
    when nothing needs to be redrawn.
    """

    def __init__(self, store: PhotoStore, brush: Optional[Brush] = None):
        self.store = store
        self.brush = brush if brush is not None else Brush()
        self.tool = Tool.POINT
        self.enabled = True
        self.confirm_save: Optional[Callable[[Photo], bool]] = None
        self.rainbow = RainbowColors()
        self._down = (0, 0)
        self._previous: Optional[tuple] = None

    def set_tool(self, tool):
        """Select the tool used by later events."""
        self.tool = Tool(tool)
        if self.tool is Tool.CONTINUOUS:
            self.reset_stroke()

    def reset_stroke(self):
        """Start the next continuous stroke afresh instead of joining the last one."""
        self._previous = None

    def handle(self, slot, event, x, y, left_button=False):
        """React to one mouse event at (x, y) in the window of a slot."""
        event = MouseEvent(event)
        if event is MouseEvent.CLOSE:
            self._close(slot)
            return None
        if not self.enabled:
            return None
        if event is MouseEvent.FOCUS:
            self.store.focus(slot)
            return None
        photo = self.store[slot]
        height, width = photo.image.shape[:2]
        if x < 0 or x >= width or y < 0 or y >= height:
            return None
        if event is MouseEvent.LEFT_DOWN:
            self._down = (x, y)

        up = event is MouseEvent.LEFT_UP
        dragging = event is MouseEvent.MOVE and left_button
        tool = self.tool

        if tool is Tool.POINT:
            if left_button and not up:
                return self._point(photo, x, y, self.brush.color)
            return self._idle(photo, x, y)
        if tool is Tool.RAINBOW:
            if left_button and not up:
                return self._point(photo, x, y, next(self.rainbow))
            return self._idle(photo, x, y)
        if tool is Tool.SELECTION:
            if up:
                photo.roi = clip_selection(*self._down, x, y, width, height)
                return None
            if event is MouseEvent.MOVE:
                return self._show_selection(photo, x, y, not left_button)
            return None
        if tool is Tool.CONTINUOUS:
            if (left_button and not up) or up:
                return self._stroke(photo, x, y)
            return self._idle(photo, x, y)
        if tool is Tool.SOFTEN:
            if up or dragging:
                return self._soften(photo, x, y)
            return self._idle(photo, x, y)

        shape = self._shape_drawer(x, y)
        if up:
            return self._apply_shape(photo, shape)
        if dragging:
            preview = photo.image.copy()
            shape(preview, self.brush.color)
            return preview
        return self._idle(photo, x, y)

    def _close(self, slot):
        if slot not in self.store:
            return
        photo = self.store[slot]
        if photo.image.size == 0:
            return
        if photo.modified and self.confirm_save is not None and self.confirm_save(photo):
            self.store.save(slot)
        self.store.close(slot)

    def _idle(self, photo, x, y):
        preview = photo.image.copy()
        draw_circle(preview, (x, y), self.brush.radius, _WHITE, 2)
        return preview

    def _point(self, photo, x, y, color):
        image = photo.image
        radius, softness = self.brush.radius, self.brush.softness
        if softness == 0:
            draw_circle(image, (x, y), radius, color, -1)
        else:
            size = radius + softness
            height, width = image.shape[:2]
            roi = Rect(x - size, y - size, 2 * size + 1, 2 * size + 1).clipped(width, height)
            piece = image[roi.y:roi.y + roi.height, roi.x:roi.x + roi.width]
            mask = np.zeros((roi.height, roi.width), dtype=np.uint8)
            draw_circle(mask, (x - roi.x, y - roi.y), radius, 255, -1)
            soft_blend(piece, mask, color, softness)
        photo.modified = True
        return image

    def _shape_drawer(self, x, y):
        down = self._down
        radius = self.brush.radius
        if self.tool is Tool.LINE:
            return lambda target, color: draw_line(target, down, (x, y), color, radius * 2 + 1)
        if self.tool is Tool.RECTANGLE:
            return lambda target, color: draw_rectangle(
                target, down, (x, y), color, radius * 2 - 1
            )
        axes = (abs(x - down[0]), abs(y - down[1]))
        return lambda target, color: draw_ellipse(target, down, axes, color, radius * 2 - 1)

    def _apply_shape(self, photo, shape):
        image = photo.image
        if self.brush.softness == 0:
            shape(image, self.brush.color)
        else:
            mask = np.zeros(image.shape[:2], dtype=np.uint8)
            shape(mask, 255)
            soft_blend(image, mask, self.brush.color, self.brush.softness)
        photo.modified = True
        return image

    def _show_selection(self, photo, x, y, fixed):
        preview = photo.image.copy()
        if fixed:
            roi = photo.roi
            corner1 = (roi.x, roi.y)
            corner2 = (roi.x + roi.width - 1, roi.y + roi.height - 1)
            color = _SELECTION_FIXED
        else:
            corner1, corner2 = self._down, (x, y)
            color = _SELECTION_DRAGGING
        draw_rectangle(preview, corner1, corner2, color, 2)
        return preview

    def _stroke(self, photo, x, y):
        image = photo.image
        if self._previous is None:
            self._previous = (x, y)
        thickness = self.brush.radius * 2 + 1
        if self.brush.softness == 0:
            draw_line(image, self._previous, (x, y), self.brush.color, thickness)
        else:
            mask = np.zeros(image.shape[:2], dtype=np.uint8)
            draw_line(mask, self._previous, (x, y), 255, thickness)
            soft_blend(image, mask, self.brush.color, self.brush.softness)
        photo.modified = True
        self._previous = (x, y)
        return image

    def _soften(self, photo, x, y):
        image = photo.image
        radius, softness = self.brush.radius, self.brush.softness
        size = radius + softness
        height, width = image.shape[:2]
        roi = Rect(x - size, y - size, 2 * size + 1, 2 * size + 1).clipped(width, height)
        piece = image[roi.y:roi.y + roi.height, roi.x:roi.x + roi.width]
        mask = np.zeros((roi.height, roi.width), dtype=np.uint8)
        draw_circle(mask, (x - roi.x, y - roi.y), radius, 255, -1)
        smoothed = gaussian_blur(piece, (softness * 2 + 1, softness * 2 + 1))
        inside = mask > 0
        piece[inside] = smoothed[inside]
        photo.modified = True
        return image