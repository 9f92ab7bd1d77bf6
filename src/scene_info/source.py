# ABOUTME: Interface every asset backend implements to feed the report
# ABOUTME: Per-category counts, names and record fetches plus a capability query

from typing import FrozenSet, Optional

from .records import Category


class RecordSource:
    """
    Read-only view of an opened asset.

    Backends override the queries they support; the defaults describe an
    empty asset. A failed fetch returns None, and the backend is responsible
    for writing its own diagnostic before doing so. The report never retries
    a failed fetch and never issues two fetches at once.
    """

    def capabilities(self) -> FrozenSet[Category]:
        """Categories this backend can provide at all."""
        return frozenset(Category)

    def count(self, category: Category) -> int:
        return 0

    def level_count(self, category: Category, id: int) -> int:
        """Number of levels of a mesh or image. Always at least 1."""
        return 1

    def name(self, category: Category, id: int) -> str:
        """Name of a record, empty if unnamed."""
        return ''

    def field_name(self, category: Category, custom_id: int) -> str:
        """Name of a custom scene field or mesh attribute, empty if unknown."""
        return ''

    def fetch(self, category: Category, id: int, level: int = 0) -> Optional[object]:
        """
        Retrieve a record.

        Args:
            category: Record category, never Category.OBJECT
            id: Record id in [0, count(category))
            level: Mesh or image level in [0, level_count(category, id))

        Returns:
            The record, or None on failure
        """
        return None
