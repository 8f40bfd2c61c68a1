import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from gedcom_spans.config import CONFIG_ENV_VAR, reset_config  # noqa: E402
from gedcom_spans.logging import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _default_config(monkeypatch):
    """Every test starts from the bundled configuration."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fresh_logging():
    reset_logging()
    yield
    reset_logging()
