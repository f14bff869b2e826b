"""
Tests for the OpenCV contour detector and image helpers.
"""

import cv2
import numpy as np
import pytest

from hold_extract.contours import ROOT_BBOX, detect_contours
from hold_extract.core import detect_holds, resolve_point
from hold_extract.errors import NoShapesFoundError, UnprocessableImageError
from hold_extract.preprocess import adjust_contrast, decode_image, maybe_resize
from hold_extract.types import DetectorParams, NormalizedPoint

LIGHT_ON_DARK = DetectorParams(contrast=1.0, dark_on_light=False, max_dimension=1024)


class TestDetectContours:
    def test_single_square(self, square_image):
        root = detect_contours(square_image, LIGHT_ON_DARK)
        assert root.bbox == ROOT_BBOX
        assert len(root.children) == 1

        node = root.children[0]
        # native coordinates: origin bottom-left
        assert node.bbox.x == pytest.approx(0.2, abs=0.02)
        assert node.bbox.y == pytest.approx(0.6, abs=0.02)
        assert node.bbox.width == pytest.approx(0.2, abs=0.02)
        assert node.bbox.height == pytest.approx(0.2, abs=0.02)
        assert len(node.points) >= 4

    def test_nested_shapes_become_children(self):
        img = np.zeros((200, 200, 3), dtype=np.uint8)
        cv2.rectangle(img, (40, 40), (159, 159), (255, 255, 255), -1)
        cv2.rectangle(img, (80, 80), (119, 119), (0, 0, 0), -1)

        root = detect_contours(img, LIGHT_ON_DARK)
        assert len(root.children) == 1
        outer = root.children[0]
        assert len(outer.children) == 1
        assert outer.bbox.width == pytest.approx(0.6, abs=0.02)
        assert outer.children[0].bbox.width == pytest.approx(0.2, abs=0.02)

    def test_blank_image_has_no_shapes(self, blank_image):
        root = detect_contours(blank_image, LIGHT_ON_DARK)
        assert root.children == ()

    def test_resized_coordinates_stay_normalized(self):
        img = np.zeros((1500, 3000), dtype=np.uint8)
        cv2.rectangle(img, (600, 300), (1199, 899), 255, -1)
        root = detect_contours(img, DetectorParams(contrast=1.0, dark_on_light=False, max_dimension=500))
        node = root.children[0]
        assert node.bbox.x == pytest.approx(0.2, abs=0.02)
        assert node.bbox.width == pytest.approx(0.2, abs=0.02)
        assert node.bbox.height == pytest.approx(0.4, abs=0.02)


class TestEndToEnd:
    def test_detect_square(self, square_image):
        holds = detect_holds(square_image)
        assert len(holds) == 1
        r = holds[0].rect
        assert r.x == pytest.approx(0.2, abs=0.02)
        assert r.y == pytest.approx(0.2, abs=0.02)
        assert r.width == pytest.approx(0.2, abs=0.03)

    def test_detect_blank(self, blank_image):
        with pytest.raises(NoShapesFoundError):
            detect_holds(blank_image)

    def test_resolve_tap_on_square(self, square_image):
        hold = resolve_point(square_image, NormalizedPoint(0.3, 0.3))
        assert hold is not None
        assert hold.rect.x == pytest.approx(0.2, abs=0.02)

    def test_resolve_tap_far_away(self, square_image):
        assert resolve_point(square_image, NormalizedPoint(0.9, 0.9)) is None


class TestPreprocess:
    def test_decode_roundtrip(self, square_image):
        ok, buf = cv2.imencode(".png", square_image)
        assert ok
        assert decode_image(buf.tobytes()).shape == square_image.shape

    @pytest.mark.parametrize("data", [b"", b"not an image"])
    def test_decode_rejects(self, data):
        with pytest.raises(UnprocessableImageError):
            decode_image(data)

    def test_maybe_resize(self):
        img = np.zeros((400, 800), dtype=np.uint8)
        out, scale = maybe_resize(img, max_side=200)
        assert out.shape == (100, 200)
        assert scale == pytest.approx(0.25)

    def test_contrast_identity(self):
        gray = np.arange(256, dtype=np.uint8).reshape(16, 16)
        assert adjust_contrast(gray, 1.0) is gray
        stretched = adjust_contrast(gray, 2.0)
        assert stretched[0, 0] == 0
        assert stretched[-1, -1] == 255


class TestImageShapes:
    def test_single_channel_image(self, square_image):
        img = square_image[:, :, :1].copy()
        assert img.shape == (100, 100, 1)
        holds = detect_holds(img)
        assert len(holds) == 1
        assert holds[0].rect.x == pytest.approx(0.2, abs=0.02)

    def test_bgra_image(self, square_image):
        img = cv2.cvtColor(square_image, cv2.COLOR_BGR2BGRA)
        assert len(detect_holds(img)) == 1

    @pytest.mark.parametrize("image", [
        np.zeros((100, 100, 2), dtype=np.uint8),
        np.zeros((100, 100, 5), dtype=np.uint8),
        np.zeros((100, 100, 3), dtype=np.float32),
        np.zeros((100, 100), dtype=np.int64),
    ])
    def test_unusable_layout_is_unprocessable(self, image):
        with pytest.raises(UnprocessableImageError):
            detect_holds(image)
        with pytest.raises(UnprocessableImageError):
            detect_contours(image, LIGHT_ON_DARK)
