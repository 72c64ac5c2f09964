"""Process-wide logging configuration."""

import logging
import sys

# Third-party loggers that are too chatty at INFO.
_NOISY_LOGGERS = ("aiosqlite", "asyncio", "httpx", "httpcore")


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger with a single stderr handler.

    Call this once, early (the app lifespan does it). Safe to call again:
    existing root handlers are replaced, not duplicated.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
