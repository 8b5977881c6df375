import os
import sys
from pathlib import Path

import pytest

# Ensure the src directory is on the path for imports
root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root / "src"))

log_dir = root / "logs"
log_dir.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("PERSONS_LOG_DIR", str(log_dir))
# keep the user's ~/.persons/logging.json out of test runs
os.environ.setdefault("PERSONS_CONFIG_DIR", str(log_dir / "config"))


@pytest.fixture
def db_file(tmp_path):
    """An existing, empty SQLite file (the service never creates one)."""
    path = tmp_path / "persons.db"
    path.touch()
    return path
