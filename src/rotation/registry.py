from .models import Player


def name_key(name):
    return name.casefold()


def unique_names(names):
    """Drop blanks and case-insensitive duplicates, keeping first spelling and order."""
    seen = set()
    out = []
    for name in names:
        name = name.strip()
        if not name:
            continue
        key = name_key(name)
        if key not in seen:
            seen.add(key)
            out.append(name)
    return out


class PlayerRegistry:
    """Known players and their cumulative completed-match counts."""

    def __init__(self, played_counts=None):
        self.players = {}
        for name, count in (played_counts or {}).items():
            self.ensure(name).played_count = count

    def canonical(self, name):
        """Return the registered spelling of ``name``, or ``name`` if unknown."""
        player = self.players.get(name_key(name))
        return player.name if player else name

    def ensure(self, name):
        key = name_key(name)
        if key not in self.players:
            self.players[key] = Player(name)
        return self.players[key]

    def played_count(self, name):
        player = self.players.get(name_key(name))
        return player.played_count if player else 0

    def record_played(self, names):
        for name in names:
            self.ensure(name).played_count += 1

    def remove(self, name):
        self.players.pop(name_key(name), None)

    def __contains__(self, name):
        return name_key(name) in self.players

    def __len__(self):
        return len(self.players)

    @property
    def played_counts(self):
        return {player.name: player.played_count for player in self.players.values()}

    def __repr__(self):
        return f"PlayerRegistry(players={len(self.players)})"
