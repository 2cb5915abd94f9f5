import json

import numpy as np
from PIL import Image

from chart_reader.errors import InsufficientAxisData, OcrEngineError, ScanFailure
from chart_reader.pipeline import (
    analyze_words, extract_usage_charts, process_candidate, process_document, run_document,
)
from chart_reader.raster import Raster
from conftest import MONTH_NAMES, chart_words, draw_bars, label_at, month_slot_x


def bill_page(heights_top, heights_bottom=None):
    """Words and pixels of a page with one chart, or two stacked charts."""
    top = chart_words(months=MONTH_NAMES[:4], row_y=316, axis=[("0", 300), ("500", 100)], legend=["2023"])
    raster = Raster.blank(800, 1000)
    raster = draw_bars(raster, [(month_slot_x(m, 0, 1), y) for m, y in zip(top["months"], heights_top)
                                if y is not None], baseline=300)
    words = list(top["all"])
    if heights_bottom is not None:
        bottom = chart_words(months=MONTH_NAMES[4:10], row_y=816, axis=[("0", 800), ("100", 600)])
        raster = draw_bars(raster, [(month_slot_x(m, 0, 1), y) for m, y in zip(bottom["months"], heights_bottom)
                                    if y is not None], baseline=800)
        words += bottom["all"]
    return raster, words


def test_end_to_end_single_chart(sink):
    raster, words = bill_page([200, 100, None, 260])
    charts = extract_usage_charts(raster, words, sink=sink)
    assert len(charts) == 1
    assert charts[0].to_public() == {
        "title": "Usage Chart 0",
        "unit": "Units",
        "data": [
            {"month": "Jan", "usage": [{"year": "2023", "value": 250}]},
            {"month": "Feb", "usage": [{"year": "2023", "value": 500}]},
            {"month": "Mar", "usage": [{"year": "2023", "value": 0}]},
            {"month": "Apr", "usage": [{"year": "2023", "value": 100}]},
        ],
    }
    assert any("Extracted 1 chart" in m for m in sink.levels("INFO"))


def test_stacked_charts_come_back_in_discovery_order():
    raster, words = bill_page([200, 200, 200, 200], [700, 650, 750, 600, None, 780])
    charts = extract_usage_charts(raster, words)
    assert [c.title for c in charts] == ["Usage Chart 0", "Usage Chart 1"]
    assert [m.usage[0].value for m in charts[0].data] == [250] * 4
    assert [m.month for m in charts[1].data] == MONTH_NAMES[4:10]
    assert [m.usage[0].value for m in charts[1].data] == [50, 75, 25, 100, 0, 10]


def test_no_chart_on_the_page_is_an_empty_result(sink):
    assert extract_usage_charts(Raster.blank(100, 100), [], sink=sink) == []
    assert "No chart candidates found on the page." in sink.levels("INFO")
    assert sink.levels("ERROR") == []


def test_candidate_with_duplicate_axis_values_is_skipped_not_fatal(sink):
    raster, words = bill_page([200, 200, 200, 200], [700, 700, 700, 700, 700, 700])
    # misread the bottom chart's "100" as "0"
    words = [label_at("0", w.bbox.center_x, w.bbox.center_y) if w.text == "100" else w for w in words]
    outcomes = analyze_words(raster, words, sink=sink)
    assert [o.ok for o in outcomes] == [True, False]
    assert isinstance(outcomes[1].error, InsufficientAxisData)
    assert len(extract_usage_charts(raster, words)) == 1
    assert any("insufficient Y-axis" in m for m in sink.levels("ERROR"))


def test_unexpected_scan_error_becomes_a_failed_outcome(sink):
    _, words = bill_page([200, 200, 200, 200])
    cand = analyze_words(Raster.blank(800, 1000), words)[0].candidate

    class BrokenRaster(Raster):
        def is_dark(self, x, y):
            raise RuntimeError("pixel buffer not ready")

    broken = BrokenRaster(np.full((1000, 800, 3), 255, dtype=np.uint8))
    outcome = process_candidate(broken, cand, sink=sink)
    assert not outcome.ok
    assert isinstance(outcome.error, ScanFailure)
    assert outcome.error.candidate_id == cand.id
    assert outcome.calibration is not None
    assert any("Failed to process chart candidate" in m for m in sink.levels("ERROR"))


def test_identical_inputs_give_identical_output():
    raster, words = bill_page([200, 150, 120, 260], [700, 650, 750, 600, 610, 780])
    a = json.dumps([c.to_public() for c in extract_usage_charts(raster, words)])
    b = json.dumps([c.to_public() for c in extract_usage_charts(raster, words)])
    assert a == b


def test_accepts_pil_images_and_arrays():
    raster, words = bill_page([200, 100, None, 260])
    img = Image.fromarray(np.array(raster.pixels))
    expected = extract_usage_charts(raster, words)
    assert extract_usage_charts(img, words) == expected
    assert extract_usage_charts(np.array(raster.pixels), words) == expected


class FakeOcr:
    def __init__(self, words=None, error=None):
        self.words = words or []
        self.error = error
        self.calls = 0

    def recognize(self, img):
        self.calls += 1
        if self.error:
            raise self.error
        return self.words


def test_process_document_runs_ocr_once():
    raster, words = bill_page([200, 100, None, 260])
    img = Image.fromarray(np.array(raster.pixels))
    ocr = FakeOcr(words)
    charts = process_document(img, ocr=ocr)
    assert ocr.calls == 1
    assert [m.usage[0].value for m in charts[0].data] == [250, 500, 0, 100]


def test_ocr_failure_returns_empty_result(sink):
    img = Image.new("RGB", (50, 50), "white")
    assert process_document(img, ocr=FakeOcr(error=OcrEngineError("tesseract missing")), sink=sink) == []
    assert "The chart processing engine failed." in sink.levels("ERROR")


def test_unexpected_engine_error_returns_empty_result(sink):
    img = Image.new("RGB", (50, 50), "white")
    assert process_document(img, ocr=FakeOcr(error=RuntimeError("engine crashed")), sink=sink) == []
    assert run_document(img, ocr=FakeOcr(error=RuntimeError("engine crashed"))) == ([], [])
    assert "The chart processing engine failed." in sink.levels("ERROR")


def test_unreadable_file_returns_empty_result(tmp_path, sink):
    bad = tmp_path / "bill.png"
    bad.write_bytes(b"not an image")
    assert process_document(str(bad), ocr=FakeOcr(), sink=sink) == []
    assert process_document(tmp_path / "missing.png", ocr=FakeOcr(), sink=sink) == []
    assert len(sink.levels("ERROR")) == 2


def test_run_document_reports_outcomes(tmp_path):
    raster, words = bill_page([200, 100, None, 260])
    path = tmp_path / "bill.png"
    Image.fromarray(np.array(raster.pixels)).save(path)
    outcomes, charts = run_document(str(path), ocr=FakeOcr(words))
    assert len(outcomes) == 1 and outcomes[0].ok
    assert outcomes[0].chart == charts[0]
    assert len(outcomes[0].readings) == 4
