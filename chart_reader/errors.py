class ChartReaderError(Exception):
    """Base class for everything this package raises on purpose."""


class InsufficientAxisData(ChartReaderError):
    """A candidate's y-axis labels cannot support a pixel -> value mapping."""


class ScanFailure(ChartReaderError):
    """Unexpected failure while measuring one candidate."""

    def __init__(self, candidate_id: int, cause: BaseException):
        super().__init__(f"Chart {candidate_id} scan failed: {cause}")
        self.candidate_id = candidate_id
        self.cause = cause


class TotalPipelineFailure(ChartReaderError):
    """Resource-level failure: nothing on the page can be measured."""


class ImageLoadError(TotalPipelineFailure):
    pass


class OcrEngineError(TotalPipelineFailure):
    pass
