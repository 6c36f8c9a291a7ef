import logging
import sys
from typing import Optional


class _ConsoleNoiseFilter(logging.Filter):
    """Let our own logs through; chatty libraries only at WARNING+."""

    THIRD_PARTY_PREFIXES = (
        "alembic", "sqlalchemy", "uvicorn", "fastapi", "starlette",
        "httpx", "httpcore", "asyncio", "multipart", "py.warnings",
    )

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(self.THIRD_PARTY_PREFIXES):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger once, early in application startup.
    Console output is filtered; the optional log file receives everything.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates on reload.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(getattr(logging, level, logging.INFO))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    logging.captureWarnings(True)
