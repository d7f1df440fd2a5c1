"""Slots of open photos, their selections and the files behind them."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
from PIL import Image

MAX_PHOTOS = 100


class PhotoError(Exception):
    """Raised for a slot that cannot be used as asked, or an image file that fails."""


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    def clipped(self, width, height):
        """Return the part of this rectangle inside an image of the given size."""
        left = min(max(self.x, 0), width)
        top = min(max(self.y, 0), height)
        right = max(min(self.x + self.width, width), left)
        bottom = max(min(self.y + self.height, height), top)
        return Rect(left, top, right - left, bottom - top)


@dataclass
class Photo:
    """One open image together with its editing state."""

    name: str
    path: Path
    image: np.ndarray
    roi: Rect
    order: int
    modified: bool = False


def load_image(path):
    """Read an image file into a BGR uint8 array."""
    try:
        with Image.open(path) as picture:
            rgb = np.asarray(picture.convert("RGB"))
    except OSError as exc:
        raise PhotoError(f"cannot read image {path}") from exc
    return np.ascontiguousarray(rgb[..., ::-1])


def save_image(path, image):
    """Write a BGR (or grey) uint8 array to a file whose format follows its extension."""
    array = np.asarray(image)
    if array.dtype != np.uint8:
        raise PhotoError("only 8-bit images can be saved")
    if array.ndim == 3 and array.shape[2] == 3:
        array = array[..., ::-1]
    elif array.ndim == 3 and array.shape[2] == 4:
        array = array[..., [2, 1, 0, 3]]
    elif array.ndim != 2:
        raise PhotoError(f"cannot save an image of shape {array.shape}")
    try:
        Image.fromarray(np.ascontiguousarray(array)).save(path)
    except (OSError, ValueError, KeyError) as exc:
        raise PhotoError(f"cannot write image {path}") from exc


class PhotoStore:
    """A fixed number of slots, each holding at most one open photo."""

    def __init__(self, capacity=MAX_PHOTOS):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._photos: list[Optional[Photo]] = [None] * capacity
        self._next_order = 0

    def _index(self, slot) -> int:
        try:
            index = operator.index(slot)
        except TypeError:
            raise PhotoError(f"invalid slot {slot!r}") from None
        if not 0 <= index < self.capacity:
            raise PhotoError(f"slot {index} is out of range")
        return index

    def _take_order(self) -> int:
        order = self._next_order
        self._next_order += 1
        return order

    def _claim(self, slot, name, path, image, modified) -> Photo:
        height, width = image.shape[:2]
        photo = Photo(
            name=name,
            path=Path(path),
            image=image,
            roi=Rect(0, 0, width, height),
            order=self._take_order(),
            modified=modified,
        )
        self._photos[slot] = photo
        return photo

    def _free_slot(self, slot) -> int:
        index = self._index(slot)
        if self._photos[index] is not None:
            raise PhotoError(f"slot {index} is already in use")
        return index

    def __getitem__(self, slot):
        photo = self._photos[self._index(slot)]
        if photo is None:
            raise PhotoError(f"slot {slot} is empty")
        return photo

    def __contains__(self, slot) -> bool:
        try:
            index = self._index(slot)
        except PhotoError:
            return False
        return self._photos[index] is not None

    def __iter__(self) -> Iterator[int]:
        return (slot for slot, photo in enumerate(self._photos) if photo is not None)

    def __len__(self) -> int:
        return sum(photo is not None for photo in self._photos)

    def first_free(self):
        """Return the lowest empty slot, or None when every slot is taken."""
        return next((slot for slot, photo in enumerate(self._photos) if photo is None), None)

    def create_blank(self, slot, width, height, color):
        """Fill a new width x height image with a BGR color."""
        index = self._free_slot(slot)
        if width <= 0 or height <= 0:
            raise ValueError("image size must be positive")
        values = np.resize(np.atleast_1d(np.asarray(color, dtype=np.float64)), 3)
        pixel = np.clip(np.rint(values), 0, 255).astype(np.uint8)
        image = np.tile(pixel, (height, width, 1))
        name = f"nueva-{index}.png"
        return self._claim(index, name, name, image, modified=True)

    def create_from_image(self, slot, image):
        """Store an existing image array as a new, unsaved photo."""
        index = self._free_slot(slot)
        array = np.asarray(image)
        if array.size == 0:
            raise PhotoError("cannot create a photo from an empty image")
        name = f"nueva-{index}.png"
        return self._claim(index, name, name, array, modified=True)

    def open(self, slot, path):
        """Read a photo from disk into an empty slot."""
        index = self._free_slot(slot)
        image = load_image(path)
        return self._claim(index, str(path), path, image, modified=False)

    def save(self, slot, path=None):
        """Write a photo to its own file, or to another path when one is given."""
        photo = self[slot]
        save_image(photo.path if path is None else path, photo.image)
        photo.modified = False

    def close(self, slot):
        """Empty a slot that holds a photo."""
        self[slot]
        self._photos[self._index(slot)] = None

    def close_all(self):
        """Empty every slot."""
        self._photos = [None] * self.capacity

    def find(self, name):
        """Return the slot of the photo with this name, or None."""
        return next((slot for slot in self if self._photos[slot].name == name), None)

    def active(self):
        """Return the slot of the most recently focused photo, or None."""
        return max(self, key=lambda slot: self._photos[slot].order, default=None)

    def focus(self, slot):
        """Bring a photo to the front."""
        self[slot].order = self._take_order()

    def counts(self):
        """Return (open photos, modified photos)."""
        used = [self._photos[slot] for slot in self]
        return len(used), sum(photo.modified for photo in used)

    def status_text(self):
        """The status line describing the open photos."""
        used, modified = self.counts()
        return f"{used} fotos abiertas, {modified} modificadas."

    def select_all(self, slot):
        """Make the whole image the selection and return it."""
        photo = self[slot]
        height, width = photo.image.shape[:2]
        photo.roi = Rect(0, 0, width, height)
        return photo.roi