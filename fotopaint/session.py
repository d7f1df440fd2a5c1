"""Helpers behind the interactive dialogs: slider mappings, handles and partner photos."""

from __future__ import annotations

from .store import PhotoError, PhotoStore

PINCH_RADIUS = 200
CORNER_LIMIT = 400


def smoothing_kernel(value):
    """Turn a smoothing slider value (1 or more) into an odd kernel size."""
    if value < 1:
        raise ValueError(f"smoothing slider value {value!r} must be at least 1")
    return value * 2 - 1


def pinch_degree(slider, radius=PINCH_RADIUS):
    """Strength of the pinch effect for a strength slider value and a radius."""
    return slider * radius * radius / 1000.0


def default_perspective_points(source_size, destination_size):
    """Initial corner handles for a perspective projection.

    Sizes are (width, height). The source handles sit on the corners of
    the source image; the destination handles form an inset quadrilateral
    whose top-right corner rests on the top edge.
    """
    src_w, src_h = source_size
    dst_w, dst_h = destination_size
    source = [
        (0.0, 0.0),
        (float(src_w), 0.0),
        (float(src_w), float(src_h)),
        (0.0, float(src_h)),
    ]
    destination = [
        (dst_w * 0.1, dst_h * 0.1),
        (dst_w * 0.9, 0.0),
        (dst_w * 0.9, dst_h * 0.9),
        (dst_w * 0.1, dst_h * 0.9),
    ]
    return source, destination


def nearest_corner(points, x, y, limit=CORNER_LIMIT):
    """Index of the point closest to (x, y) in city-block distance.

    Distances are truncated to whole pixels; only points closer than limit
    count, and the first of equally close points wins. None if none is close.
    """
    best, best_distance = None, limit
    for index, (px, py) in enumerate(points):
        distance = int(abs(x - px) + abs(y - py))
        if distance < best_distance:
            best, best_distance = index, distance
    return best


def scale_points(points, old_size, new_size):
    """Rescale points from an image of old_size to one of new_size, both (width, height)."""
    old_w, old_h = old_size
    new_w, new_h = new_size
    if old_w == 0 or old_h == 0:
        raise ValueError("cannot rescale points from an empty image")
    fx, fy = new_w / old_w, new_h / old_h
    return [(px * fx, py * fy) for px, py in points]


def blend_partner(store: PhotoStore):
    """Pick the photos to blend: the active one and the most recent other one.

    Returns (active, partner, row), where row is the partner's position
    among the open photos in slot order. With a single photo open, the
    partner is the active photo itself and row is 0.
    """
    active = store.active()
    if active is None:
        raise PhotoError("no photo is open")
    partner, row = active, 0
    for position, slot in enumerate(store):
        if slot != active and (partner == active or store[slot].order > store[partner].order):
            partner, row = slot, position
    return active, partner, row