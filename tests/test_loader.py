import fitz
import pytest
from PIL import Image

from chart_reader.errors import ImageLoadError
from chart_reader.loader import load_image
from chart_reader.raster import Raster


def test_png_is_fully_decoded(tmp_path):
    path = tmp_path / "bill.png"
    img = Image.new("RGB", (40, 20), "white")
    img.putpixel((5, 5), (0, 0, 0))
    img.save(path)
    loaded = load_image(str(path))
    assert loaded.size == (40, 20)
    assert Raster.from_image(loaded).is_dark(5, 5)


def test_rgba_png_keeps_alpha_for_the_raster(tmp_path):
    path = tmp_path / "bill.png"
    Image.new("RGBA", (10, 10), (0, 0, 0, 0)).save(path)
    loaded = load_image(str(path))
    assert loaded.mode == "RGBA"
    assert not Raster.from_image(loaded).is_dark(3, 3)


def test_pdf_page_is_rendered(tmp_path):
    path = tmp_path / "bill.pdf"
    doc = fitz.open()
    page = doc.new_page(width=200, height=100)
    page.draw_rect(fitz.Rect(10, 10, 50, 90), color=(0, 0, 0), fill=(0, 0, 0))
    doc.save(path.as_posix())
    doc.close()

    img = load_image(str(path), dpi=72)
    assert img.size == (200, 100)
    r = Raster.from_image(img)
    assert r.is_dark(30, 50)
    assert not r.is_dark(150, 50)

    assert load_image(str(path), dpi=144).size == (400, 200)
    with pytest.raises(ImageLoadError):
        load_image(str(path), page=3)


def test_missing_and_corrupt_files(tmp_path):
    with pytest.raises(ImageLoadError):
        load_image(str(tmp_path / "nope.png"))
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"\x00\x01")
    with pytest.raises(ImageLoadError):
        load_image(str(bad))
