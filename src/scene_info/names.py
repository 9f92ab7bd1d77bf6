# ABOUTME: Display names for builtin and custom fields and attributes
# ABOUTME: Falls back to the numeric id when the source has no name registered

from enum import Enum
from typing import Union

from .records import Category
from .source import RecordSource


class NameResolver:
    """Maps scene field and mesh attribute identifiers to display names."""

    def __init__(self, source: RecordSource):
        self.source = source

    def resolve(self, category: Category, name: Union[Enum, int]) -> str:
        """
        Get the display name of a field.

        Args:
            category: Category the field belongs to
            name: Builtin enum member, or a custom numeric id

        Returns:
            Builtin label, registered custom name, or 'Custom(<id>)'
        """
        if isinstance(name, Enum):
            return name.label
        custom = self.source.field_name(category, name)
        return custom if custom else f"Custom({name})"
