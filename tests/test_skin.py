import numpy as np
import pytest

from core.skin import is_skin_tone, skin_mask, SKIN_BANDS


@pytest.mark.parametrize("rgb, band", [
    ((150, 100, 80), "light"),
    ((120, 90, 60), "medium"),
    ((70, 50, 40), "dark"),
    ((150, 140, 100), "olive"),
])
def test_in_band_samples_are_skin(rgb, band):
    assert bool(SKIN_BANDS[band](*rgb))
    assert is_skin_tone(*rgb) is True


@pytest.mark.parametrize("rgb", [
    (0, 0, 0),
    (255, 255, 255),
    (0, 0, 255),
    (100, 150, 80),   # green dominant
    (40, 30, 20),     # too dark for every band
    (128, 128, 128),  # grey
])
def test_out_of_band_samples_are_not_skin(rgb):
    assert is_skin_tone(*rgb) is False


def test_skin_mask_matches_scalar_predicate():
    rng = np.random.default_rng(7)
    px = rng.integers(0, 256, size=(20, 25, 4), dtype=np.uint8)
    mask = skin_mask(px)
    assert mask.shape == (20, 25) and mask.dtype == bool
    for y in range(20):
        for x in range(25):
            r, g, b = px[y, x, :3]
            assert mask[y, x] == is_skin_tone(r, g, b)


def test_skin_mask_has_no_uint8_wraparound():
    # r - g would wrap to a large positive value in uint8
    px = np.array([[[10, 200, 0, 255]]], dtype=np.uint8)
    assert not skin_mask(px)[0, 0]
    assert is_skin_tone(10, 200, 0) is False
