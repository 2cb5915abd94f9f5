from __future__ import annotations
import numpy as np
from PIL import Image

DARK_THRESHOLD = 240


class Raster:
    """
    Read-only RGB pixel grid.

    The scanner only ever asks `is_dark(x, y)`, so any pixel source (decoded
    file, rendered PDF page, synthetic array) can stand behind it.
    """

    def __init__(self, rgb: np.ndarray, dark_threshold: int = DARK_THRESHOLD):
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"expected an H x W x 3 array, got shape {rgb.shape}")
        pixels = np.array(rgb, dtype=np.uint8, copy=True)
        pixels.setflags(write=False)
        self._pixels = pixels
        self._dark_threshold = dark_threshold

    @classmethod
    def from_image(cls, img: Image.Image, dark_threshold: int = DARK_THRESHOLD) -> "Raster":
        img.load()
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            # transparent areas read as background, not as black
            rgba = img.convert("RGBA")
            background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
            img = Image.alpha_composite(background, rgba)
        return cls(np.asarray(img.convert("RGB")), dark_threshold)

    @classmethod
    def from_array(cls, arr: np.ndarray, dark_threshold: int = DARK_THRESHOLD) -> "Raster":
        arr = np.asarray(arr)
        if arr.ndim == 2:
            arr = np.stack([arr] * 3, axis=-1)
        elif arr.ndim == 3 and arr.shape[2] == 4:
            arr = arr[:, :, :3]
        return cls(arr, dark_threshold)

    @classmethod
    def blank(cls, width: int, height: int, dark_threshold: int = DARK_THRESHOLD) -> "Raster":
        return cls(np.full((height, width, 3), 255, dtype=np.uint8), dark_threshold)

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def is_dark(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        # R, G and B are each checked on their own
        return bool((self._pixels[y, x] < self._dark_threshold).all())

    def with_rect(self, x0: int, y0: int, x1: int, y1: int, color=(0, 0, 0)) -> "Raster":
        """Copy with the half-open rectangle [x0, x1) x [y0, y1) filled."""
        pixels = self._pixels.copy()
        pixels[y0:y1, x0:x1] = color
        return Raster(pixels, self._dark_threshold)
