GROUP_SIZE = 4
DEFAULT_COURT_NAME = "Court {id}"

WAITING = 'waiting'
PRIORITY = 'priority'
QUEUE = 'queue'
COURT = 'court'
LOCATION_KINDS = (WAITING, PRIORITY, QUEUE, COURT)


class Player:
    def __init__(self, name, played_count=0):
        self.name = name
        self.played_count = played_count

    def __repr__(self):
        return f"Player(name={self.name}, played_count={self.played_count})"


class Court:
    def __init__(self, id, name=None, group=None):
        self.id = id
        self.name = name or default_court_name(id)
        self.group = group  # None when empty

    @property
    def is_empty(self):
        return not self.group

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'group': list(self.group) if self.group else None}

    def __repr__(self):
        return f"Court(id={self.id}, name={self.name}, group={self.group})"


class Location:
    """Where a player sits for a manual move.

    ``index`` is the queue group index for QUEUE and the court id for COURT.
    ``slot`` is a member position inside a queue group or court group, or the
    insert position inside the waiting/priority lists.
    """

    def __init__(self, kind, index=None, slot=None):
        if kind not in LOCATION_KINDS:
            raise ValueError(f"Unknown location kind: {kind}")
        self.kind = kind
        self.index = index
        self.slot = slot

    @classmethod
    def from_dict(cls, data):
        return cls(data['kind'], data.get('index'), data.get('slot'))

    def same_container(self, other):
        if self.kind != other.kind:
            return False
        if self.kind in (WAITING, PRIORITY):
            return True
        return self.index == other.index

    def __repr__(self):
        return f"Location(kind={self.kind}, index={self.index}, slot={self.slot})"


def default_court_name(court_id, template=DEFAULT_COURT_NAME):
    return template.format(id=court_id)
