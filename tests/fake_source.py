# ABOUTME: Dictionary-backed RecordSource used by the report tests
# ABOUTME: Writes its own failure diagnostics to a shared sink like a real backend

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from scene_info.records import Category
from scene_info.source import RecordSource


class FakeSource(RecordSource):
    """
    In-memory asset.

    records maps a category to a list indexed by id; an entry that is a
    list holds the levels of a mesh or image. counts overrides the list
    length, and ids past the end of the list fail to fetch. fail holds
    (category, id) or (category, id, level) tuples that always fail.
    """

    def __init__(self, records=None, counts=None, names=None, field_names=None,
                 fail=(), capabilities=None, sink=None):
        self.records = records or {}
        self.counts = counts or {}
        self.names = names or {}
        self.field_names = field_names or {}
        self.fail = set(fail)
        self.supported = frozenset(Category) if capabilities is None else frozenset(capabilities)
        self.sink = sink
        self.fetches = []

    def _levels(self, category, id):
        entries = self.records.get(category, [])
        if id >= len(entries):
            return []
        entry = entries[id]
        return list(entry) if isinstance(entry, list) else [entry]

    def capabilities(self):
        return self.supported

    def count(self, category):
        if category in self.counts:
            return self.counts[category]
        return len(self.records.get(category, []))

    def level_count(self, category, id):
        return max(len(self._levels(category, id)), 1)

    def name(self, category, id):
        return self.names.get((category, id), '')

    def field_name(self, category, custom_id):
        return self.field_names.get((category, custom_id), '')

    def fetch(self, category, id, level=0):
        self.fetches.append((category, id, level))
        levels = self._levels(category, id)
        if (category, id) in self.fail or (category, id, level) in self.fail \
                or level >= len(levels):
            if self.sink is not None:
                self.sink.write(f"Cannot retrieve {category.tag} {id}\n")
            return None
        return levels[level]
