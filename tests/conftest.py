"""
Shared pytest fixtures for court rotation tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip statistical sampling checks
"""
import pytest
import random
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rotation.engine import RotationEngine


@pytest.fixture
def rng():
    """Seeded random source so formation runs are reproducible."""
    return random.Random(1234)


@pytest.fixture
def engine(rng):
    """Fresh engine with two default courts."""
    return RotationEngine(rng=rng)


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point storage at a temporary data directory."""
    import storage

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(storage, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(storage, 'STATE_FILE', str(data_dir / "state.yaml"))
    monkeypatch.setattr(storage, 'SETTINGS_FILE', str(data_dir / "settings.yaml"))
    monkeypatch.setattr(storage, 'LOCK_FILE', str(data_dir / ".lock"))
    return str(data_dir)


@pytest.fixture
def client(temp_data_dir):
    """Flask test client backed by a fresh in-process engine."""
    import app as app_module
    app_module.reset_engine()
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client
    app_module.reset_engine()


@pytest.fixture
def eight_players():
    return ["Ann", "Ben", "Cal", "Dee", "Eve", "Fay", "Gus", "Hal"]
