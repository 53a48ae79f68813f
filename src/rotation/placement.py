"""Manual player moves between the waiting list, priority list, queue and courts.

A move runs against copies of every container and is committed only when all
of its steps succeed, so a rejected move leaves the engine untouched.
"""
from .models import COURT, GROUP_SIZE, PRIORITY, QUEUE, WAITING


class MoveTransaction:
    def __init__(self, engine):
        self.engine = engine
        self.lists = {WAITING: list(engine.waiting), PRIORITY: list(engine.priority)}
        self.queue = [list(group) for group in engine.queue]
        self.court_groups = {court.id: list(court.group or []) for court in engine.courts}

    def _group(self, location, creating=False):
        if location.kind == QUEUE:
            index = location.index
            if not isinstance(index, int) or index < 0:
                return None
            if index == len(self.queue) and creating:
                self.queue.append([])
            if index >= len(self.queue):
                return None
            return self.queue[index]
        if location.kind == COURT:
            return self.court_groups.get(location.index)
        return None

    def _remove(self, name, location):
        """Take ``name`` out of ``location``; return the position it held or None."""
        if location.kind in (WAITING, PRIORITY):
            members = self.lists[location.kind]
        else:
            members = self._group(location)
            if members is None:
                return None
        slot = location.slot
        if isinstance(slot, int) and 0 <= slot < len(members) and members[slot] == name:
            members.pop(slot)
            return slot
        if name not in members:
            return None
        position = members.index(name)
        members.pop(position)
        return position

    def _insert(self, name, location, position):
        if location.kind in (WAITING, PRIORITY):
            members = [n for n in self.lists[location.kind] if n != name]
            if position is None:
                members.append(name)
            else:
                members.insert(min(max(position, 0), len(members)), name)
            self.lists[location.kind] = members
            return
        members = self._group(location, creating=True)
        if position is None:
            members.append(name)
        else:
            members.insert(min(max(position, 0), len(members)), name)

    def _place(self, name, target):
        """Add ``name`` at ``target``; return the member it displaced, if any."""
        if target.kind in (WAITING, PRIORITY):
            self._insert(name, target, target.slot)
            return None
        members = self._group(target, creating=True)
        slot = target.slot
        if isinstance(slot, int) and 0 <= slot < len(members):
            replaced = members[slot]
            members[slot] = name
            return replaced
        members.append(name)
        return None

    def _target_has_room(self, target):
        if target.kind in (WAITING, PRIORITY):
            return True
        if target.kind == QUEUE and target.index == len(self.queue):
            return True
        members = self._group(target)
        if members is None:
            return False
        if isinstance(target.slot, int) and 0 <= target.slot < len(members):
            return True
        return len(members) < GROUP_SIZE

    def run(self, name, source, target):
        if source.same_container(target):
            return False
        if not self._target_has_room(target):
            return False
        position = self._remove(name, source)
        if position is None:
            return False
        if target.kind in (QUEUE, COURT):
            for kind in (WAITING, PRIORITY):
                self.lists[kind] = [n for n in self.lists[kind] if n != name]
        replaced = self._place(name, target)
        if replaced is not None:
            self._insert(replaced, source, position)
        self.commit()
        return True

    def commit(self):
        engine = self.engine
        engine.waiting = self.lists[WAITING]
        engine.priority = self.lists[PRIORITY]
        engine.queue = [group for group in self.queue if group]
        for court in engine.courts:
            court.group = self.court_groups[court.id] or None
