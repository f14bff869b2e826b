from typing import Tuple

import cv2
import numpy as np

from .errors import UnprocessableImageError


def decode_image(data: bytes) -> np.ndarray:
    if not data:
        raise UnprocessableImageError("Empty image data.")
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise UnprocessableImageError("Could not decode image. Provide a valid JPG/PNG.")
    return img


def check_image(img) -> np.ndarray:
    if not isinstance(img, np.ndarray) or img.size == 0 or img.ndim not in (2, 3):
        raise UnprocessableImageError()
    # gray, BGR or BGRA only; Otsu thresholding needs 8-bit input
    if img.ndim == 3 and img.shape[2] not in (1, 3, 4):
        raise UnprocessableImageError(f"Unsupported channel count: {img.shape[2]}")
    if img.dtype != np.uint8:
        raise UnprocessableImageError(f"Unsupported pixel type: {img.dtype}")
    return img


def maybe_resize(img: np.ndarray, max_side: int = 1024) -> Tuple[np.ndarray, float]:
    h, w = img.shape[:2]
    scale = 1.0
    m = max(h, w)
    if m > max_side:
        scale = max_side / float(m)
        img = cv2.resize(img, (max(1, int(w * scale)), max(1, int(h * scale))), interpolation=cv2.INTER_AREA)
    return img, scale


def to_gray(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 1:
        return np.ascontiguousarray(img[:, :, 0])
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def denoise_light(gray: np.ndarray) -> np.ndarray:
    # Keep edges; mild denoise
    return cv2.bilateralFilter(gray, d=5, sigmaColor=50, sigmaSpace=50)


def adjust_contrast(gray: np.ndarray, contrast: float) -> np.ndarray:
    """Linear stretch around mid-gray; 1.0 is a no-op."""
    if contrast == 1.0:
        return gray
    # addWeighted saturates to uint8 instead of taking absolute values
    return cv2.addWeighted(gray, contrast, gray, 0.0, 127.5 * (1.0 - contrast))


def binarize(gray: np.ndarray, dark_on_light: bool) -> np.ndarray:
    # dark_on_light: dark shapes become foreground
    mode = cv2.THRESH_BINARY_INV if dark_on_light else cv2.THRESH_BINARY
    _, mask = cv2.threshold(gray, 0, 255, mode + cv2.THRESH_OTSU)
    return mask
