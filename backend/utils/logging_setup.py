# backend/utils/logging_setup.py
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger and wire uvicorn/fastapi loggers into it."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    fmt = logging.Formatter(FORMAT)
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        # avoid duplicate handlers on reload
        if not any(getattr(h, "baseFilename", None) == str(path.resolve()) for h in root.handlers):
            handler = logging.handlers.RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
            handler.setFormatter(fmt)
            root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(level.upper())
