from .models import GROUP_SIZE

SEPARATOR = "|"


def group_signature(group):
    """Order-independent identity of a group: sorted names joined by '|'."""
    return SEPARATOR.join(sorted(group))


class SignatureTracker:
    """Remembers the last group each player was seated into."""

    def __init__(self, last_signatures=None):
        self.last_signatures = dict(last_signatures) if last_signatures else {}

    def is_immediate_repeat(self, group):
        if len(group) != GROUP_SIZE:
            return False
        signature = group_signature(group)
        return all(self.last_signatures.get(name) == signature for name in group)

    def record_seated(self, group):
        signature = group_signature(group)
        for name in group:
            self.last_signatures[name] = signature

    def try_break(self, group, tail):
        """Swap one member of a repeating group with one player from ``tail``.

        Scans group positions against tail positions and returns the first
        ``(new_group, new_tail)`` that is no longer a repeat, or None. The
        swapped-out member takes the swapped-in player's place in the tail.
        """
        for gi in range(len(group)):
            for tj in range(len(tail)):
                swapped = list(group)
                swapped[gi] = tail[tj]
                if not self.is_immediate_repeat(swapped):
                    new_tail = list(tail)
                    new_tail[tj] = group[gi]
                    return swapped, new_tail
        return None

    def clear(self):
        self.last_signatures = {}

    def __repr__(self):
        return f"SignatureTracker(players={len(self.last_signatures)})"
