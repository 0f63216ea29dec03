import numpy as np
import pytest

from photo_enhancer import (
    InvalidDimensionsError,
    PixelBuffer,
    RESAMPLE_METHODS,
    resample,
)


class TestResample:

    @pytest.mark.parametrize("method", RESAMPLE_METHODS)
    def test_same_size_is_identity(self, noisy_buffer, method):
        out = resample(noisy_buffer, noisy_buffer.width, noisy_buffer.height, method=method)
        assert out is not noisy_buffer
        assert np.array_equal(out.pixels, noisy_buffer.pixels)

    @pytest.mark.parametrize("method", RESAMPLE_METHODS)
    @pytest.mark.parametrize("target", [(1, 1), (3, 2), (30, 21), (25, 4), (5, 40)])
    def test_output_shape(self, noisy_buffer, method, target):
        out = resample(noisy_buffer, *target, method=method)
        assert out.dimensions == target
        assert len(out) == target[0] * target[1] * 4
        assert out.pixels.dtype == np.uint8

    def test_downscale_averages_areas(self):
        arr = np.zeros((8, 8, 4), dtype=np.uint8)
        arr[::2, ::2] = 255
        arr[1::2, 1::2] = 255
        out = resample(PixelBuffer(arr), 4, 4)
        # nearest-neighbour sampling would only ever return 0 or 255
        assert set(np.unique(out.pixels)).issubset({127, 128})

    @pytest.mark.parametrize("method", RESAMPLE_METHODS)
    def test_upscale_keeps_flat_color(self, method):
        src = PixelBuffer.filled(3, 3, (100, 150, 200, 180))
        out = resample(src, 9, 9, method=method)
        diff = np.abs(out.pixels.astype(int) - np.array([100, 150, 200, 180]))
        assert diff.max() <= 1

    @pytest.mark.parametrize("method", RESAMPLE_METHODS)
    def test_mixed_target_averages_shrinking_axis(self, method):
        # 40 wide, 97 tall, every third row white
        arr = np.zeros((97, 40, 4), dtype=np.uint8)
        arr[::3] = 255
        src = PixelBuffer(arr)
        mixed = resample(src, 80, 7, method=method).pixels.astype(int)
        shrunk = resample(src, 40, 7).pixels.astype(int)
        assert np.abs(mixed[:, 0] - shrunk[:, 0]).max() <= 10
        assert np.abs(mixed[:, -1] - shrunk[:, -1]).max() <= 10

    def test_alpha_is_resampled(self):
        arr = np.zeros((2, 4, 4), dtype=np.uint8)
        arr[:, :2, 3] = 255
        out = resample(PixelBuffer(arr), 2, 1)
        assert list(out.alpha[0]) == [255, 0]

    def test_bspline_on_single_row(self):
        src = PixelBuffer.filled(4, 1, (10, 20, 30, 255))
        out = resample(src, 12, 3, method="bspline")
        assert out.dimensions == (12, 3)

    def test_does_not_touch_source(self, noisy_buffer):
        before = noisy_buffer.pixels.copy()
        resample(noisy_buffer, 20, 15)
        assert np.array_equal(noisy_buffer.pixels, before)

    @pytest.mark.parametrize("target", [(0, 5), (5, 0), (-2, 3)])
    def test_invalid_target(self, noisy_buffer, target):
        with pytest.raises(InvalidDimensionsError):
            resample(noisy_buffer, *target)

    def test_unknown_method(self, noisy_buffer):
        with pytest.raises(ValueError):
            resample(noisy_buffer, 20, 20, method="nearest")
