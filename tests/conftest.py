"""Pytest configuration for unity-vscode tests."""
import logging
import sys
from pathlib import Path

import pytest

logger = logging.getLogger(__name__)

# Add src directory to Python path so tests run from a plain checkout
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def store():
    from unity_vscode.services.preferences import MemoryPreferenceStore
    return MemoryPreferenceStore()


@pytest.fixture
def unity_project(tmp_path):
    """A project root with the folders Unity creates."""
    (tmp_path / "Assets" / "Scripts").mkdir(parents=True)
    (tmp_path / "ProjectSettings").mkdir()
    return tmp_path


@pytest.fixture(autouse=True)
def restore_global_config():
    """Restore global config mutations between tests."""
    from unity_vscode.core import config as core_config
    from unity_vscode.cli.utils import config as cli_config

    prior_core = core_config.config
    prior_cli = cli_config._config
    yield
    core_config.set_config(prior_core)
    cli_config._config = prior_cli
