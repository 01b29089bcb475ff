"""Logging setup shared by the API process and scripts."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once.

    Repeated calls only adjust the level so uvicorn reloads and tests
    do not stack duplicate handlers.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_infovoto", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._infovoto = True  # type: ignore[attr-defined]
        root.addHandler(handler)
