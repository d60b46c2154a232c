import shutil
from pathlib import Path

import pytest


@pytest.fixture
def shared_datadir(tmp_path) -> Path:
    """Serve the shared test data from tests/data for tests in this subdirectory."""
    data_dir = tmp_path / 'data'
    shutil.copytree(Path(__file__).parent.parent / 'data', data_dir)
    return data_dir
