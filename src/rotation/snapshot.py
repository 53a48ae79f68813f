"""Versioned state snapshot for persisting a RotationEngine.

Loading is tolerant field by field: anything missing or of the wrong shape
falls back to that field's default while the rest of the snapshot is kept.
Disabled courts are session state and never written.
"""
import logging

from .engine import RotationEngine
from .models import GROUP_SIZE
from .registry import PlayerRegistry
from .signatures import SignatureTracker

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def to_snapshot(engine):
    return {
        'version': SNAPSHOT_VERSION,
        'waiting': list(engine.waiting),
        'queue': [list(group) for group in engine.queue],
        'courts': [court.to_dict() for court in engine.courts],
        'last_input': engine.last_input,
        'signatures': dict(engine.tracker.last_signatures),
        'priority': list(engine.priority),
        'rest_once': list(engine.rest_once),
        'played_counts': engine.registry.played_counts,
    }


def _names(value):
    if not isinstance(value, list):
        return None
    return [name for name in value if isinstance(name, str) and name]


def _group(value):
    group = _names(value)
    if group and len(group) > GROUP_SIZE:
        logger.warning("Dropping oversized group %s", group)
        return None
    return group or None


def _groups(value):
    if not isinstance(value, list):
        return None
    groups = [_group(group) for group in value]
    return [group for group in groups if group]


def _courts(value):
    if not isinstance(value, list):
        return None
    courts = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = entry.get('name')
        group = _group(entry.get('group'))
        courts.append((name if isinstance(name, str) and name.strip() else None, group))
    return courts


def _signatures(value):
    if not isinstance(value, dict):
        return None
    return {k: v for k, v in value.items() if isinstance(k, str) and isinstance(v, str)}


def _counts(value):
    if not isinstance(value, dict):
        return None
    return {k: v for k, v in value.items()
            if isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool) and v >= 0}


def from_snapshot(data, settings=None, rng=None):
    """Build an engine from ``data``; non-dict input yields a fresh engine."""
    engine = RotationEngine(settings, rng)
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring unreadable snapshot of type %s", type(data).__name__)
        return engine

    def field(key, parse):
        parsed = parse(data.get(key))
        if parsed is None and key in data:
            logger.warning("Snapshot field %r malformed; using default", key)
        return parsed

    waiting = field('waiting', _names)
    if waiting is not None:
        engine.waiting = waiting
    queue = field('queue', _groups)
    if queue is not None:
        engine.queue = queue
    courts = field('courts', _courts)
    if courts is not None:
        engine.courts = []
        for court_id, (name, group) in enumerate(courts, start=1):
            court = engine.new_court(court_id)
            court.name = name or court.name
            court.group = group
            engine.courts.append(court)
    last_input = data.get('last_input')
    if isinstance(last_input, str):
        engine.last_input = last_input
    signatures = field('signatures', _signatures)
    if signatures is not None:
        engine.tracker = SignatureTracker(signatures)
    priority = field('priority', _names)
    if priority is not None:
        engine.priority = priority
    rest_once = field('rest_once', _names)
    if rest_once is not None:
        engine.rest_once = rest_once
    counts = field('played_counts', _counts)
    if counts is not None:
        engine.registry = PlayerRegistry(counts)
    for name in engine.all_names():
        engine.registry.ensure(name)
    return engine
