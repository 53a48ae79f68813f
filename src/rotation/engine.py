import logging
import random

from .formation import eligible_players, form_groups
from .models import Court, GROUP_SIZE, default_court_name
from .placement import MoveTransaction
from .registry import PlayerRegistry, name_key, unique_names
from .signatures import SignatureTracker

logger = logging.getLogger(__name__)

REPLACE = 'replace'
ADD_NEW_ONLY = 'add-new-only'
REGISTER_MODES = (REPLACE, ADD_NEW_ONLY)


def get_default_settings():
    """Default engine settings."""
    return {
        'default_court_count': 2,
        'max_court_count': 32,
        'court_name_template': 'Court {id}',
        'random_seed': None,
    }


class RotationEngine:
    """In-memory rotation state and the commands that mutate it.

    Every command runs to completion before returning. Commands that cannot
    apply (unknown court, full group, too few players) leave the state
    unchanged and return False instead of raising.
    """

    def __init__(self, settings=None, rng=None):
        self.settings = {**get_default_settings(), **(settings or {})}
        self.rng = rng if rng is not None else random.Random(self.settings['random_seed'])
        self.registry = PlayerRegistry()
        self.tracker = SignatureTracker()
        self.waiting = []
        self.priority = []
        self.rest_once = []
        self.queue = []
        self.courts = self._default_courts()
        self.disabled = set()  # session-scoped, never persisted
        self.last_input = ''

    def _default_courts(self):
        return [self.new_court(i) for i in range(1, self.settings['default_court_count'] + 1)]

    def new_court(self, court_id):
        return Court(court_id, default_court_name(court_id, self.settings['court_name_template']))

    def court(self, court_id):
        for court in self.courts:
            if court.id == court_id:
                return court
        return None

    def is_disabled(self, court_id):
        return court_id in self.disabled

    def _seat(self, court, group):
        court.group = group
        self.tracker.record_seated(group)
        logger.info("Seated %s on %s", group, court.name)

    def _seat_from_queue(self, court):
        if court.is_empty and not self.is_disabled(court.id) and self.queue:
            self._seat(court, self.queue.pop(0))

    # ---------------------- Pool queries ----------------------

    def all_names(self):
        """Every name currently placed anywhere: waiting, priority, queue and courts."""
        names = list(self.waiting) + list(self.priority)
        for group in self.queue:
            names.extend(group)
        for court in self.courts:
            names.extend(court.group or [])
        return names

    @property
    def eligible_count(self):
        priority, generic = eligible_players(self.priority, self.waiting, self.rest_once)
        return len(priority) + len(generic)

    @property
    def can_form(self):
        return self.eligible_count >= GROUP_SIZE

    def stats(self):
        on_courts = sum(len(court.group or []) for court in self.courts)
        queued = sum(len(group) for group in self.queue)
        return {
            'waiting': len(self.waiting),
            'on_courts': on_courts,
            'queued': queued,
            'total': len(self.waiting) + on_courts + queued,
        }

    # ---------------------- Commands ----------------------

    def register_players(self, names, mode=REPLACE):
        if mode not in REGISTER_MODES:
            raise ValueError(f"Unknown registration mode: {mode}")
        names = [self.registry.canonical(n) for n in unique_names(names)]
        if mode == REPLACE:
            self.waiting = names
            self.queue = []
            self.priority = []
            self.rest_once = []
            added = names
        else:
            present = {name_key(n) for n in self.all_names()}
            added = [n for n in names if name_key(n) not in present]
            self.waiting.extend(added)
        for name in added:
            self.registry.ensure(name)
        logger.info("Registered %d player(s) (%s)", len(added), mode)
        return bool(added) or mode == REPLACE

    def set_court_count(self, count):
        count = max(0, min(self.settings['max_court_count'], int(count)))
        if count == len(self.courts):
            return False
        if count > len(self.courts):
            for court_id in range(len(self.courts) + 1, count + 1):
                self.courts.append(self.new_court(court_id))
        else:
            removed = self.courts[count:]
            displaced = [court.group for court in removed if court.group]
            self.queue = displaced + self.queue
            self.courts = self.courts[:count]
            for court_id, court in enumerate(self.courts, start=1):
                court.id = court_id
            self.disabled = {court_id for court_id in self.disabled if court_id <= count}
            if displaced:
                logger.info("Moved %d group(s) from removed courts to the queue front", len(displaced))
        return True

    def toggle_court_disabled(self, court_id):
        court = self.court(court_id)
        if court is None:
            return False
        if court_id in self.disabled:
            self.disabled.discard(court_id)
            self._seat_from_queue(court)
        else:
            self.disabled.add(court_id)
            if court.group:
                self.queue.insert(0, court.group)
                court.group = None
        return True

    def rename_court(self, court_id, name):
        court = self.court(court_id)
        if court is None:
            return False
        name = (name or '').strip()
        court.name = name or default_court_name(court_id, self.settings['court_name_template'])
        return True

    def run_formation(self):
        """Form new groups from eligible players and seat them.

        Returns the number of new groups, or 0 when fewer than four players
        were eligible. The rest-once set is cleared either way.
        """
        resting = list(self.rest_once)
        priority, generic = eligible_players(self.priority, self.waiting, resting)
        result = form_groups(priority, generic, self.tracker,
                             self.registry.played_counts, self.rng)
        self.rest_once = []
        if result is None:
            logger.debug("Formation skipped: only %d eligible player(s)",
                         len(priority) + len(generic))
            return 0

        pending = list(self.queue)
        new_groups = result.groups
        for court in self.courts:
            if not court.is_empty or self.is_disabled(court.id):
                continue
            if pending:
                self._seat(court, pending.pop(0))
            elif new_groups:
                self._seat(court, new_groups.pop(0))
        self.queue = pending + new_groups

        rested = set(resting)
        returning = [n for n in self.waiting if n in rested]
        returning += [n for n in self.priority if n in rested and n not in returning]
        self.waiting = returning + result.carry_over
        self.priority = list(result.carry_over)
        logger.info("Formation made %d group(s); %d queued, %d carried over",
                    len(result.groups), len(self.queue), len(result.carry_over))
        return len(result.groups)

    def finish_court(self, court_id):
        court = self.court(court_id)
        if court is None:
            return False
        finished = list(court.group or [])
        court.group = None
        self.registry.record_played(finished)
        self.waiting.extend(finished)
        self._seat_from_queue(court)
        return True

    def toggle_rest_once(self, name):
        name = self.registry.canonical(name)
        if name in self.rest_once:
            self.rest_once.remove(name)
            return True
        if name not in self.waiting and name not in self.priority:
            return False
        self.rest_once.append(name)
        return True

    def remove_player(self, name):
        name = self.registry.canonical(name)
        if name not in self.waiting:
            return False
        self.waiting.remove(name)
        self.rest_once = [n for n in self.rest_once if n != name]
        self.priority = [n for n in self.priority if n != name]
        self.registry.remove(name)
        return True

    def move_player(self, name, source, target):
        return MoveTransaction(self).run(self.registry.canonical(name), source, target)

    def reset_all(self):
        self.registry = PlayerRegistry()
        self.tracker.clear()
        self.waiting = []
        self.priority = []
        self.rest_once = []
        self.queue = []
        self.courts = [self.new_court(1), self.new_court(2)]
        self.disabled = set()
        self.last_input = ''
        logger.info("All rotation state reset")

    def __repr__(self):
        return (f"RotationEngine(waiting={len(self.waiting)}, queue={len(self.queue)}, "
                f"courts={len(self.courts)})")
