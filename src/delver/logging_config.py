import logging
import os
import sys
from typing import Optional


def configure_logging(default_level: int = logging.INFO, level: Optional[int] = None) -> None:
    """Configure the root logger with a stderr handler.

    An explicit `level` wins; otherwise the DELVER_LOG_LEVEL env var is used if set.
    Existing root handlers are replaced so repeated calls do not duplicate output.
    """
    if level is None:
        level = default_level
        level_name = os.getenv("DELVER_LOG_LEVEL")
        if level_name:
            level = getattr(logging, level_name.upper(), default_level)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
