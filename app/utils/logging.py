# app/utils/logging.py
import logging
import sys

from app.utils.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_root_name = "app"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_root_name)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger w przestrzeni "app", jeden handler na stdout dla calego serwisu."""
    _configure_root()
    if name != _root_name and not name.startswith(_root_name + "."):
        name = f"{_root_name}.{name}"
    return logging.getLogger(name)
