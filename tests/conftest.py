"""Pytest configuration for fsgate tests.

Ensures the project root is in sys.path so imports work correctly.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.command.privileged import PrivilegedExecutor  # noqa: E402


@pytest.fixture
def fs_root(tmp_path: Path) -> Path:
    """Empty directory standing in for the fixed root."""
    root = tmp_path / "fs"
    root.mkdir()
    return root


@pytest.fixture
def direct_executor() -> PrivilegedExecutor:
    """Real executor without elevation, for running commands against tmp dirs."""
    return PrivilegedExecutor(wrapper=())
