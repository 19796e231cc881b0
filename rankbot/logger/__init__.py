import inspect
import logging.handlers
import os
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_FILE = LOG_DIR / "rank_bot.log"
LOG_FORMAT = "%(asctime)s - [%(levelname)s] - %(location)s(): %(message)s {%(lineno)d}"

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def _module_path(pathname: str) -> str:
    """rankbot/cogs/ranks.py -> rankbot.cogs.ranks; files outside the package keep their stem."""
    path = Path(pathname).resolve()
    try:
        parts = path.relative_to(PACKAGE_ROOT.parent).with_suffix("").parts
    except ValueError:
        return path.stem
    return ".".join(parts)


def _owner_class(func_name: str) -> str | None:
    frame = inspect.currentframe()
    while frame is not None:
        if frame.f_code.co_name == func_name:
            owner = frame.f_locals.get("self")
            return type(owner).__name__ if owner is not None else None
        frame = frame.f_back
    return None


class LocationFilter(logging.Filter):
    """Stamps ``record.location`` as ``module.Class.function`` for the log format."""

    def filter(self, record):
        parts = [_module_path(record.pathname), _owner_class(record.funcName), record.funcName]
        record.location = ".".join(part for part in parts if part)
        return True


def _build_logger(name: str) -> logging.Logger:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        LOG_FILE, when="midnight", interval=1, backupCount=5, encoding="utf-8"
    )
    console_handler = logging.StreamHandler()

    built = logging.getLogger(name)
    built.setLevel(os.getenv("LOG_LEVEL", "DEBUG").upper())
    built.addFilter(LocationFilter())
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        built.addHandler(handler)
    built.propagate = False
    return built


logger = _build_logger("RankBot")
