import logging
import random

from .models import GROUP_SIZE
from .sampling import weighted_sample

logger = logging.getLogger(__name__)


class FormationResult:
    def __init__(self, priority_groups, generic_groups, carry_over):
        self.priority_groups = priority_groups
        self.generic_groups = generic_groups
        self.carry_over = carry_over

    @property
    def groups(self):
        """Groups in seating order: priority-origin first, then generic."""
        return self.priority_groups + self.generic_groups

    def __repr__(self):
        return (f"FormationResult(priority_groups={self.priority_groups}, "
                f"generic_groups={self.generic_groups}, carry_over={self.carry_over})")


def eligible_players(priority, waiting, rest_once):
    """Split the rest-filtered inputs into (priority, generic) without overlap."""
    resting = set(rest_once)
    eligible_priority = []
    for name in priority:
        if name not in resting and name not in eligible_priority:
            eligible_priority.append(name)
    taken = set(eligible_priority)
    generic = []
    for name in waiting:
        if name not in resting and name not in taken:
            generic.append(name)
            taken.add(name)
    return eligible_priority, generic


def _average_played(group, played_counts):
    return sum(played_counts.get(name, 0) for name in group) / len(group)


def _break_repeat(group, pool, tracker):
    if not tracker.is_immediate_repeat(group):
        return group, pool
    broken = tracker.try_break(group, pool)
    if broken is None:
        logger.debug("Unavoidable repeat accepted: %s", group)
        return group, pool
    return broken


def form_groups(priority, generic, tracker, played_counts, rng=None):
    """Build the next round of groups-of-four.

    ``priority`` holds last round's leftovers and is grouped first; ``generic``
    is everyone else eligible. Returns None when fewer than four players are
    available.
    """
    if rng is None:
        rng = random.Random()

    priority = list(priority)
    pool = list(generic)
    if len(priority) + len(pool) < GROUP_SIZE:
        return None

    priority_groups = []
    while len(priority) >= GROUP_SIZE:
        group, priority = priority[:GROUP_SIZE], priority[GROUP_SIZE:]
        group, pool = _break_repeat(group, pool, tracker)
        priority_groups.append(group)

    need = GROUP_SIZE - len(priority)
    if priority and len(pool) >= need:
        drawn = weighted_sample(pool, need, played_counts, rng)
        pool = [name for name in pool if name not in drawn]
        group, pool = _break_repeat(priority + drawn, pool, tracker)
        priority_groups.append(group)
        priority = []

    generic_groups = []
    reshuffles_left = len(pool)
    while len(pool) >= GROUP_SIZE:
        group = weighted_sample(pool, GROUP_SIZE, played_counts, rng)
        tail = [name for name in pool if name not in group]
        if tracker.is_immediate_repeat(group):
            broken = tracker.try_break(group, tail)
            if broken is not None:
                group, tail = broken
            # Never taken today: try_break only fails on an empty tail, which
            # means exactly four names were left.
            elif len(pool) > GROUP_SIZE and reshuffles_left > 0:
                reshuffles_left -= 1
                rng.shuffle(pool)
                continue
            else:
                logger.debug("Unavoidable repeat accepted: %s", group)
        generic_groups.append(group)
        pool = tail
        reshuffles_left = len(pool)

    generic_groups.sort(key=lambda g: _average_played(g, played_counts))
    carry_over = priority + pool
    logger.debug("Formed %d priority and %d generic groups, carry-over %s",
                 len(priority_groups), len(generic_groups), carry_over)
    return FormationResult(priority_groups, generic_groups, carry_over)
