# chart_reader/loader.py
from pathlib import Path
import io
import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError

from .errors import ImageLoadError


def render_pdf_page(pdf_path: str, page: int = 0, dpi: int = 144) -> Image.Image:
    """Render one PDF page to an RGB image at `dpi`."""
    try:
        with fitz.open(pdf_path) as doc:
            if not 0 <= page < doc.page_count:
                raise ImageLoadError(f"{pdf_path} has {doc.page_count} page(s); page {page} requested")
            zoom = dpi / 72.0
            pix = doc.load_page(page).get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            png_bytes = pix.tobytes("png")
    except ImageLoadError:
        raise
    except Exception as e:
        raise ImageLoadError(f"Could not render {pdf_path}: {e}") from e
    img = Image.open(io.BytesIO(png_bytes)).convert("RGB")
    img.load()
    return img


def load_image(path: str, page: int = 0, dpi: int = 144) -> Image.Image:
    """
    Decode a bill image (PNG/JPEG/...) or one page of a PDF.

    The returned image is fully loaded; pixel scanning must never start on a
    lazily decoded file.
    """
    p = Path(path)
    if not p.exists():
        raise ImageLoadError(f"No such file: {path}")
    if p.suffix.lower() == ".pdf":
        return render_pdf_page(p.as_posix(), page=page, dpi=dpi)
    try:
        with Image.open(p) as img:
            img.load()
            # keep alpha; the raster composites it onto white
            return img.copy() if img.mode in ("RGBA", "LA", "P") else img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Could not decode {path}: {e}") from e
