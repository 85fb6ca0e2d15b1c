import logging
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # The CLI reconfigures the root logger; put it back so later tests start clean.
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def key_door_grid():
    return [
        "###########",
        "#S   a    #",
        "#A#########",
        "#       b #",
        "# #B#######",
        "# #     E #",
        "###########",
    ]
