"""
YAML-backed settings and state snapshot storage for the court rotation engine.
"""
import logging
import os

import yaml
from filelock import FileLock

from rotation.engine import get_default_settings
from rotation.snapshot import from_snapshot, to_snapshot

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def default_data_dir(base_dir: str = BASE_DIR) -> str:
    """ROTATION_DATA_DIR, else the checkout's data/ folder, else data/ under the working directory."""
    configured = os.environ.get('ROTATION_DATA_DIR')
    if configured:
        return configured
    if os.path.exists(os.path.join(base_dir, 'pyproject.toml')):
        return os.path.join(base_dir, 'data')
    return os.path.join(os.getcwd(), 'data')


DATA_DIR = default_data_dir()

STATE_FILE = os.path.join(DATA_DIR, 'state.yaml')
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')
LOCK_FILE = os.path.join(DATA_DIR, '.lock')


def data_lock(lock_file: str = None) -> FileLock:
    """Lock guarding read-modify-write cycles on the data directory."""
    lock_file = lock_file or LOCK_FILE
    os.makedirs(os.path.dirname(lock_file), exist_ok=True)
    return FileLock(lock_file, timeout=10)


def _valid_setting(key: str, value) -> bool:
    if key == 'random_seed':
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    if key in ('default_court_count', 'max_court_count'):
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if key == 'court_name_template':
        if not isinstance(value, str):
            return False
        try:
            value.format(id=1)
        except (KeyError, IndexError, ValueError, AttributeError):
            return False
        return True
    return True


def load_settings(path: str = None) -> dict:
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    path = path or SETTINGS_FILE
    if not os.path.exists(path):
        return defaults
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return defaults
    if not isinstance(data, dict):
        logger.warning(f'Ignoring {path}: expected a mapping')
        return defaults
    settings = dict(data)
    for key, value in defaults.items():
        if key not in data:
            settings[key] = value
        elif not _valid_setting(key, data[key]):
            logger.warning(f'Invalid setting {key}={data[key]!r} in {path}; using {value!r}')
            settings[key] = value
    return settings


def save_settings(settings: dict, path: str = None):
    """Save settings to YAML file."""
    path = path or SETTINGS_FILE
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)


def load_state(path: str = None):
    """Load the raw snapshot; an absent or unreadable file means no prior state."""
    path = path or STATE_FILE
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return None


def save_state(snapshot: dict, path: str = None) -> bool:
    """Write the snapshot. Failures are logged and reported, never raised."""
    path = path or STATE_FILE
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(snapshot, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
    except OSError as e:
        logger.warning(f'Failed to save {path}: {e}')
        return False
    return True


def load_engine(state_path: str = None, settings_path: str = None, rng=None):
    """Build an engine from the stored snapshot and settings."""
    return from_snapshot(load_state(state_path), load_settings(settings_path), rng)


def save_engine(engine, state_path: str = None) -> bool:
    return save_state(to_snapshot(engine), state_path)


def clear_state(path: str = None):
    """Delete the stored snapshot."""
    path = path or STATE_FILE
    if os.path.exists(path):
        os.remove(path)


def parse_names(raw: str) -> list:
    """Split free text into trimmed, non-blank names (one per line)."""
    return [line.strip() for line in (raw or '').splitlines() if line.strip()]
