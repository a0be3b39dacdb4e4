"""Face region cropping from landmark extents.

The box arithmetic runs in single precision and truncates to integers at
each step.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from smartface.types import CropBox, CroppedRegion, as_landmark_array, pixel_format_of


def compute_crop_box(
    landmarks: Any,
    image_width: int,
    image_height: int,
    padding: float,
) -> Optional[CropBox]:
    """Compute the padded, clamped crop rectangle around all landmarks.

    Args:
        landmarks: Landmark set in normalized image coordinates.
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        padding: Fraction of the box size added around it.

    Returns:
        CropBox (x, y, w, h) in pixels, or None when the clamped rectangle
        is empty.
    """
    lms = as_landmark_array(landmarks, strict=False)
    if len(lms) == 0:
        return None

    f32 = np.float32
    min_x = min(f32(1.0), lms[:, 0].min())
    max_x = max(f32(0.0), lms[:, 0].max())
    min_y = min(f32(1.0), lms[:, 1].min())
    max_y = max(f32(0.0), lms[:, 1].max())

    img_w = f32(image_width)
    img_h = f32(image_height)

    w = int((max_x - min_x) * img_w)
    h = int((max_y - min_y) * img_h)
    cx = int(min_x * img_w + f32(w // 2))
    cy = int(min_y * img_h + f32(h // 2))

    scale = f32(1.0) + f32(padding)
    pad_w = int(f32(w) * scale)
    pad_h = int(f32(h) * scale)
    x = cx - pad_w // 2
    y = cy - pad_h // 2

    x = max(0, x)
    y = max(0, y)
    pad_w = min(pad_w, image_width - x)
    pad_h = min(pad_h, image_height - y)

    if pad_w > 0 and pad_h > 0:
        return CropBox(x, y, pad_w, pad_h)
    return None


def crop_region(
    image: np.ndarray,
    landmarks: Any,
    padding: float,
    pixel_format: Optional[str] = None,
) -> Optional[CroppedRegion]:
    """Cut the landmark region out of an image.

    Returns None (nothing to emit) when the crop box is empty.
    """
    img_h, img_w = image.shape[:2]
    box = compute_crop_box(landmarks, img_w, img_h, padding)
    if box is None:
        return None

    cropped = image[box.y:box.y + box.height, box.x:box.x + box.width].copy()
    return CroppedRegion(
        image=cropped,
        box=box,
        pixel_format=pixel_format or pixel_format_of(image),
    )


__all__ = ["compute_crop_box", "crop_region"]
