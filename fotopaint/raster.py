"""Drawing, filtering and geometric warping on BGR image arrays."""

from __future__ import annotations

import numpy as np
from scipy import ndimage

_ORDERS = {"nearest": 0, "linear": 1, "cubic": 3}


def saturate(array):
    """Round and clamp values into the unsigned 8-bit range."""
    values = np.rint(np.asarray(array, dtype=np.float64))
    return np.clip(values, 0, 255).astype(np.uint8)


def _finish(values, dtype):
    if np.dtype(dtype) == np.uint8:
        return saturate(values)
    return np.asarray(values).astype(dtype, copy=False)


def _channel_values(count, color):
    return np.resize(np.atleast_1d(np.asarray(color, dtype=np.float64)), count)


def _color(image, color):
    if image.ndim == 2:
        values = _channel_values(1, color)
    else:
        values = _channel_values(image.shape[2], color)
    values = _finish(values, image.dtype)
    return values[0] if image.ndim == 2 else values


def to_gray(image):
    """Convert a BGR image to a single luminance channel."""
    image = np.asarray(image)
    if image.ndim == 2:
        return image.copy()
    blue, green, red = (image[..., c].astype(np.float64) for c in range(3))
    return _finish(0.114 * blue + 0.587 * green + 0.299 * red, image.dtype)


def _window(image, xmin, ymin, xmax, ymax):
    height, width = image.shape[:2]
    x0 = max(int(np.floor(xmin)), 0)
    y0 = max(int(np.floor(ymin)), 0)
    x1 = min(int(np.ceil(xmax)) + 1, width)
    y1 = min(int(np.ceil(ymax)) + 1, height)
    if x0 >= x1 or y0 >= y1:
        return None
    ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float64)
    return (slice(y0, y1), slice(x0, x1)), xs, ys


def _paint(image, window, mask, color):
    region = image[window]
    region[mask] = _color(image, color)


def _half(thickness):
    return max(thickness / 2.0, 0.5)


def _require_thickness(thickness, allow_filled=True):
    if thickness == 0 or (thickness < 0 and not allow_filled):
        raise ValueError(f"invalid thickness {thickness}")


def draw_circle(image, center, radius, color, thickness):
    """Draw a circle in place; a negative thickness fills it."""
    _require_thickness(thickness)
    cx, cy = center
    reach = radius + (0 if thickness < 0 else _half(thickness))
    found = _window(image, cx - reach, cy - reach, cx + reach, cy + reach)
    if found is None:
        return
    window, xs, ys = found
    distance = np.hypot(xs - cx, ys - cy)
    if thickness < 0:
        mask = distance <= radius
    else:
        mask = np.abs(distance - radius) <= _half(thickness)
    _paint(image, window, mask, color)


def _segment_distance(xs, ys, start, end):
    (x0, y0), (x1, y1) = start, end
    dx, dy = x1 - x0, y1 - y0
    length2 = dx * dx + dy * dy
    if length2 == 0:
        t = 0.0
    else:
        t = np.clip(((xs - x0) * dx + (ys - y0) * dy) / length2, 0.0, 1.0)
    return np.hypot(xs - (x0 + t * dx), ys - (y0 + t * dy))


def draw_line(image, start, end, color, thickness):
    """Draw a segment with round ends in place."""
    _require_thickness(thickness, allow_filled=False)
    half = _half(thickness)
    found = _window(
        image,
        min(start[0], end[0]) - half,
        min(start[1], end[1]) - half,
        max(start[0], end[0]) + half,
        max(start[1], end[1]) + half,
    )
    if found is None:
        return
    window, xs, ys = found
    _paint(image, window, _segment_distance(xs, ys, start, end) <= half, color)


def draw_rectangle(image, corner1, corner2, color, thickness):
    """Draw a rectangle in place; a negative thickness fills it."""
    _require_thickness(thickness)
    x0, x1 = sorted((corner1[0], corner2[0]))
    y0, y1 = sorted((corner1[1], corner2[1]))
    half = 0 if thickness < 0 else (thickness - 1) // 2
    found = _window(image, x0 - half, y0 - half, x1 + half, y1 + half)
    if found is None:
        return
    window, xs, ys = found
    mask = (xs >= x0 - half) & (xs <= x1 + half) & (ys >= y0 - half) & (ys <= y1 + half)
    if thickness > 0:
        inner = (xs > x0 + half) & (xs < x1 - half) & (ys > y0 + half) & (ys < y1 - half)
        mask &= ~inner
    _paint(image, window, mask, color)


def draw_ellipse(image, center, axes, color, thickness):
    """Draw an axis-aligned full ellipse in place; a negative thickness fills it."""
    _require_thickness(thickness)
    cx, cy = center
    a, b = (abs(value) for value in axes)
    if a == 0 or b == 0:
        draw_line(image, (cx - a, cy - b), (cx + a, cy + b), color, max(thickness, 1))
        return
    half = 0 if thickness < 0 else _half(thickness)
    found = _window(image, cx - a - half, cy - b - half, cx + a + half, cy + b + half)
    if found is None:
        return
    window, xs, ys = found
    dx, dy = xs - cx, ys - cy
    level = (dx / a) ** 2 + (dy / b) ** 2
    if thickness < 0:
        mask = level <= 1.0
    else:
        gradient = 2.0 * np.sqrt(dx**2 / a**4 + dy**2 / b**4)
        mask = np.abs(level - 1.0) / np.maximum(gradient, 1e-12) <= half
    _paint(image, window, mask, color)


def _spatial_size(image, height, width):
    return (height, width) + (1,) * (image.ndim - 2)


def box_blur(image, ksize):
    """Average each pixel over a (width, height) box."""
    width, height = ksize
    if width <= 0 or height <= 0:
        raise ValueError("kernel size must be positive")
    source = np.asarray(image)
    result = ndimage.uniform_filter(
        source.astype(np.float64), size=_spatial_size(source, height, width), mode="mirror"
    )
    return _finish(result, source.dtype)


def _require_odd(size):
    if size <= 0 or size % 2 == 0:
        raise ValueError(f"kernel size {size} must be positive and odd")


def _gaussian_kernel(size):
    if size == 1:
        return np.ones(1)
    sigma = 0.3 * ((size - 1) * 0.5 - 1) + 0.8
    offsets = np.arange(size) - (size - 1) / 2.0
    kernel = np.exp(-(offsets**2) / (2 * sigma**2))
    return kernel / kernel.sum()


def gaussian_blur(image, ksize):
    """Gaussian smoothing with odd (width, height) kernel sizes."""
    width, height = ksize
    _require_odd(width)
    _require_odd(height)
    source = np.asarray(image)
    result = ndimage.correlate1d(
        source.astype(np.float64), _gaussian_kernel(width), axis=1, mode="mirror"
    )
    result = ndimage.correlate1d(result, _gaussian_kernel(height), axis=0, mode="mirror")
    return _finish(result, source.dtype)


def median_blur(image, ksize):
    """Median of each pixel's ksize x ksize neighbourhood."""
    _require_odd(ksize)
    source = np.asarray(image)
    if ksize == 1:
        return source.copy()
    return ndimage.median_filter(source, size=_spatial_size(source, ksize, ksize), mode="nearest")


def _derivative_kernel(order, size):
    kernel = np.array([1.0])
    for _ in range(size - 1 - order):
        kernel = np.convolve(kernel, [1.0, 1.0])
    for _ in range(order):
        kernel = np.convolve(kernel, [-1.0, 1.0])
    return kernel


def sobel(image, dx, dy, ksize, scale, delta):
    """Sobel derivative of orders (dx, dy), times scale plus delta."""
    if ksize not in (1, 3, 5, 7):
        raise ValueError(f"unsupported Sobel kernel size {ksize}")
    if dx < 0 or dy < 0 or dx + dy == 0:
        raise ValueError("derivative orders must be non-negative and not both zero")
    sizes = []
    for order in (dx, dy):
        size = (3 if order > 0 else 1) if ksize == 1 else ksize
        if order >= size:
            raise ValueError("derivative order too high for the kernel size")
        sizes.append(size)
    source = np.asarray(image)
    result = ndimage.correlate1d(
        source.astype(np.float64), _derivative_kernel(dx, sizes[0]), axis=1, mode="mirror"
    )
    result = ndimage.correlate1d(result, _derivative_kernel(dy, sizes[1]), axis=0, mode="mirror")
    return _finish(result * scale + delta, source.dtype)


def _sample(image, rows, cols, order, mode, background=0.0):
    source = np.asarray(image, dtype=np.float64)
    if source.ndim == 2:
        fill = float(_channel_values(1, background)[0])
        return ndimage.map_coordinates(source, [rows, cols], order=order, mode=mode, cval=fill)
    fills = _channel_values(source.shape[2], background)
    planes = [
        ndimage.map_coordinates(plane, [rows, cols], order=order, mode=mode, cval=float(fill))
        for plane, fill in zip(np.moveaxis(source, -1, 0), fills)
    ]
    return np.stack(planes, axis=-1)


def resize(image, size, interpolation):
    """Scale to (width, height) with "nearest", "linear" or "cubic" interpolation."""
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError("target size must be positive")
    if interpolation not in _ORDERS:
        raise ValueError(f"unknown interpolation {interpolation!r}")
    source = np.asarray(image)
    src_height, src_width = source.shape[:2]
    scale_x, scale_y = src_width / width, src_height / height
    if interpolation == "nearest":
        cols = np.minimum((np.arange(width) * scale_x).astype(int), src_width - 1)
        rows = np.minimum((np.arange(height) * scale_y).astype(int), src_height - 1)
        return source[rows[:, None], cols[None, :]].copy()
    xs = (np.arange(width) + 0.5) * scale_x - 0.5
    ys = (np.arange(height) + 0.5) * scale_y - 0.5
    grid_rows, grid_cols = np.meshgrid(ys, xs, indexing="ij")
    result = _sample(source, grid_rows, grid_cols, _ORDERS[interpolation], "nearest")
    return _finish(result, source.dtype)


def warp_affine(image, matrix, size, background=(0, 0, 0)):
    """Apply a 2x3 forward affine map into a (width, height) image, bicubically."""
    forward = np.vstack([np.asarray(matrix, dtype=np.float64).reshape(2, 3), [0.0, 0.0, 1.0]])
    try:
        inverse = np.linalg.inv(forward)
    except np.linalg.LinAlgError:
        raise ValueError("affine matrix is not invertible") from None
    width, height = size
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    src_x = inverse[0, 0] * xs + inverse[0, 1] * ys + inverse[0, 2]
    src_y = inverse[1, 0] * xs + inverse[1, 1] * ys + inverse[1, 2]
    source = np.asarray(image)
    result = _sample(source, src_y, src_x, 3, "constant", background)
    return _finish(result, source.dtype)


def perspective_matrix(source, destination):
    """The 3x3 homography taking four source points onto four destination points."""
    src = np.asarray(source, dtype=np.float64).reshape(4, 2)
    dst = np.asarray(destination, dtype=np.float64).reshape(4, 2)
    rows, rhs = [], []
    for (x, y), (u, v) in zip(src, dst):
        rows.append([x, y, 1, 0, 0, 0, -u * x, -u * y])
        rhs.append(u)
        rows.append([0, 0, 0, x, y, 1, -v * x, -v * y])
        rhs.append(v)
    system = np.array(rows)
    if np.linalg.matrix_rank(system) < 8:
        raise ValueError("points do not define a perspective transform")
    solution = np.linalg.solve(system, np.array(rhs))
    return np.append(solution, 1.0).reshape(3, 3)


def warp_perspective(image, matrix, target):
    """Project image onto a copy of target; pixels that fall outside keep target's values."""
    source = np.asarray(image)
    result = np.array(target, copy=True)
    if source.ndim != result.ndim or source.shape[2:] != result.shape[2:]:
        raise ValueError("image and target must have the same channels")
    try:
        inverse = np.linalg.inv(np.asarray(matrix, dtype=np.float64).reshape(3, 3))
    except np.linalg.LinAlgError:
        raise ValueError("perspective matrix is not invertible") from None
    height, width = result.shape[:2]
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    denominator = inverse[2, 0] * xs + inverse[2, 1] * ys + inverse[2, 2]
    with np.errstate(divide="ignore", invalid="ignore"):
        src_x = (inverse[0, 0] * xs + inverse[0, 1] * ys + inverse[0, 2]) / denominator
        src_y = (inverse[1, 0] * xs + inverse[1, 1] * ys + inverse[1, 2]) / denominator
    src_height, src_width = source.shape[:2]
    inside = (
        np.isfinite(src_x)
        & np.isfinite(src_y)
        & (src_x >= 0)
        & (src_x <= src_width - 1)
        & (src_y >= 0)
        & (src_y <= src_height - 1)
    )
    if inside.any():
        values = _sample(source, src_y[inside], src_x[inside], 3, "nearest")
        result[inside] = _finish(values, result.dtype)
    return result