import numpy as np
import pytest

from fotopaint.raster import (
    box_blur,
    draw_circle,
    draw_ellipse,
    draw_line,
    draw_rectangle,
    gaussian_blur,
    median_blur,
    perspective_matrix,
    resize,
    saturate,
    sobel,
    to_gray,
    warp_affine,
    warp_perspective,
)


def _random_image(height=10, width=10):
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def test_saturate_clamps_and_rounds():
    result = saturate([-5.0, 12.4, 300.0])
    assert result.dtype == np.uint8
    assert result.tolist() == [0, 12, 255]


def test_to_gray_extremes_and_neutral():
    image = np.array([[[255, 255, 255], [0, 0, 0], [77, 77, 77]]], dtype=np.uint8)
    assert to_gray(image).tolist() == [[255, 0, 77]]


def test_filled_circle():
    image = np.zeros((21, 21, 3), dtype=np.uint8)
    draw_circle(image, (10, 10), 5, (255, 0, 0), -1)
    assert image[10, 10].tolist() == [255, 0, 0]
    assert image[10, 15].tolist() == [255, 0, 0]
    assert image[10, 16].tolist() == [0, 0, 0]
    mask = image[..., 0] > 0
    assert np.array_equal(mask, mask[::-1, :])
    assert np.array_equal(mask, mask.T)


def test_circle_outline_leaves_center():
    image = np.zeros((21, 21), dtype=np.uint8)
    draw_circle(image, (10, 10), 5, 200, 1)
    assert image[10, 10] == 0
    assert image[10, 15] == 200


def test_circle_zero_thickness_rejected():
    with pytest.raises(ValueError):
        draw_circle(np.zeros((5, 5), dtype=np.uint8), (2, 2), 1, 1, 0)


def test_horizontal_line():
    image = np.zeros((11, 11), dtype=np.uint8)
    draw_line(image, (2, 5), (8, 5), 200, 1)
    assert (image[5, 2:9] == 200).all()
    assert image[4, 5] == 0
    assert image[5, 1] == 0
    assert image.sum() == 200 * 7


def test_line_zero_thickness_rejected():
    with pytest.raises(ValueError):
        draw_line(np.zeros((5, 5), dtype=np.uint8), (0, 0), (4, 4), 1, 0)


def test_rectangle_outline():
    image = np.zeros((10, 10), dtype=np.uint8)
    draw_rectangle(image, (2, 2), (7, 6), 9, 1)
    expected = np.zeros((10, 10), dtype=np.uint8)
    expected[2:7, 2:8] = 9
    expected[3:6, 3:7] = 0
    assert np.array_equal(image, expected)


def test_rectangle_filled_with_swapped_corners():
    image = np.zeros((10, 10), dtype=np.uint8)
    draw_rectangle(image, (7, 6), (2, 2), 9, -1)
    expected = np.zeros((10, 10), dtype=np.uint8)
    expected[2:7, 2:8] = 9
    assert np.array_equal(image, expected)


def test_filled_ellipse_reaches_axes():
    image = np.zeros((21, 21), dtype=np.uint8)
    draw_ellipse(image, (10, 10), (6, 3), 50, -1)
    assert image[10, 10] == 50
    assert image[10, 16] == 50
    assert image[10, 17] == 0
    assert image[13, 10] == 50
    assert image[14, 10] == 0


def test_box_blur_keeps_constant_and_sum():
    constant = np.full((6, 6, 3), 40, dtype=np.uint8)
    assert np.array_equal(box_blur(constant, (3, 3)), constant)
    impulse = np.zeros((9, 9))
    impulse[4, 4] = 9.0
    assert np.isclose(box_blur(impulse, (3, 3)).sum(), 9.0)


def test_gaussian_blur_impulse_symmetric():
    impulse = np.zeros((9, 9))
    impulse[4, 4] = 255.0
    result = gaussian_blur(impulse, (5, 5))
    assert np.isclose(result.sum(), 255.0)
    assert np.allclose(result, result[::-1, :])
    assert np.allclose(result, result.T)
    assert result.argmax() == 4 * 9 + 4


def test_gaussian_blur_even_size_rejected():
    with pytest.raises(ValueError):
        gaussian_blur(np.zeros((5, 5)), (4, 3))


def test_median_removes_isolated_pixel():
    image = np.zeros((7, 7, 3), dtype=np.uint8)
    image[3, 3] = 255
    assert not median_blur(image, 3).any()


def test_sobel_constant_gives_delta():
    image = np.full((6, 6), 100, dtype=np.uint8)
    assert (sobel(image, 1, 0, 3, 1.0, 128) == 128).all()


def test_sobel_ramp_invariants():
    ramp = np.tile(np.arange(8, dtype=np.float64), (8, 1))
    gx = sobel(ramp, 1, 0, 3, 1.0, 0.0)
    interior = gx[1:-1, 1:-1]
    assert np.allclose(interior, interior[0, 0])
    assert interior[0, 0] > 0
    assert np.allclose(sobel(ramp, 0, 1, 3, 1.0, 0.0), 0.0)
    assert np.allclose(sobel(ramp.T, 0, 1, 3, 1.0, 0.0), gx.T)


def test_sobel_bad_kernel_rejected():
    with pytest.raises(ValueError):
        sobel(np.zeros((5, 5)), 1, 0, 4, 1.0, 0.0)


def test_resize_nearest_duplicates_pixels():
    image = _random_image(2, 2)
    result = resize(image, (4, 4), "nearest")
    assert np.array_equal(result, np.repeat(np.repeat(image, 2, axis=0), 2, axis=1))


def test_resize_linear_shape_and_constant():
    image = np.full((5, 4, 3), 90, dtype=np.uint8)
    result = resize(image, (7, 3), "linear")
    assert result.shape == (3, 7, 3)
    assert (result == 90).all()


def test_resize_unknown_interpolation():
    with pytest.raises(ValueError):
        resize(_random_image(), (4, 4), "lanczos")


def test_warp_affine_identity():
    image = _random_image()
    result = warp_affine(image, [[1, 0, 0], [0, 1, 0]], (10, 10), (0, 0, 0))
    diff = np.abs(result.astype(int) - image.astype(int))
    assert diff[1:-1, 1:-1].max() <= 1


def test_warp_affine_translation_fills_background():
    image = _random_image()
    result = warp_affine(image, [[1, 0, 2], [0, 1, 0]], (10, 10), (0, 0, 255))
    assert (result[:, :2] == np.array([0, 0, 255], dtype=np.uint8)).all()
    diff = np.abs(result[2:8, 4:8].astype(int) - image[2:8, 2:6].astype(int))
    assert diff.max() <= 1


def test_perspective_matrix_identity():
    points = [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert np.allclose(perspective_matrix(points, points), np.eye(3))


def test_perspective_matrix_maps_points():
    source = [(0, 0), (10, 0), (10, 10), (0, 10)]
    destination = [(2, 1), (9, 3), (8, 9), (1, 7)]
    matrix = perspective_matrix(source, destination)
    for (x, y), (u, v) in zip(source, destination):
        mapped = matrix @ np.array([x, y, 1.0])
        assert np.allclose(mapped[:2] / mapped[2], (u, v))


def test_perspective_matrix_degenerate():
    with pytest.raises(ValueError):
        perspective_matrix([(0, 0), (1, 1), (2, 2), (3, 3)], [(0, 0), (1, 0), (1, 1), (0, 1)])


def test_warp_perspective_identity():
    image = _random_image()
    result = warp_perspective(image, np.eye(3), np.zeros_like(image))
    assert np.abs(result.astype(int) - image.astype(int)).max() <= 1


def test_warp_perspective_keeps_target_outside():
    image = np.full((20, 20, 3), 200, dtype=np.uint8)
    target = np.full((20, 20, 3), 7, dtype=np.uint8)
    matrix = perspective_matrix(
        [(0, 0), (19, 0), (19, 19), (0, 19)], [(5, 5), (9, 5), (9, 9), (5, 9)]
    )
    result = warp_perspective(image, matrix, target)
    assert np.abs(result[7, 7].astype(int) - 200).max() <= 1
    assert (result[0, 0] == 7).all()
    assert (result[15, 15] == 7).all()
    assert (target == 7).all()