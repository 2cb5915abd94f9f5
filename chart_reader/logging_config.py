import logging
from typing import Any, Callable, Optional, Union
from rich.logging import RichHandler

# (level, message, payload) -> None. Levels are "DEBUG", "INFO", "WARNING", "ERROR".
LogSink = Callable[..., None]

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure root logging to use RichHandler for pretty console logs.

    Calling this multiple times is safe (idempotent); it reconfigures the root handlers.
    """
    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.INFO)

    # Remove existing handlers to avoid duplicate logs when reloading
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(show_time=False, rich_tracebacks=True)],
    )


def logging_sink(logger: Optional[logging.Logger] = None) -> LogSink:
    """Adapt the pipeline's (level, message, payload) sink onto a stdlib logger."""
    logger = logger or logging.getLogger("chart_reader")

    def sink(level: str, message: str, payload: Any = None) -> None:
        lvl = _LEVELS.get(level.upper(), logging.INFO)
        if payload is None:
            logger.log(lvl, message)
        elif isinstance(payload, BaseException):
            logger.log(lvl, "%s: %s", message, payload, exc_info=payload)
        else:
            logger.log(lvl, "%s | %s", message, payload)

    return sink


def resolve_sink(sink: Optional[LogSink]) -> LogSink:
    return sink if sink is not None else logging_sink()


__all__ = ["LogSink", "setup_logging", "logging_sink", "resolve_sink"]
