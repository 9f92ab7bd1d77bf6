# ABOUTME: Formatting helpers and base class shared by all category reporters
# ABOUTME: Headers with reference counts, value and size formatting, color emphasis

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

import numpy as np

from ..bounds import BoundsCalculator
from ..names import NameResolver
from ..records import Category, DEFAULT_DATA_FLAGS, DataFlag, flag_labels
from ..references import OutOfRangeReference, ReferenceAnalyzer
from ..utils.logging_utils import BOLD, COLORS, RESET


class Style:
    """
    Optional ANSI emphasis of report findings.

    Stripping the codes always gives back the plain text.
    """

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def _wrap(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{BOLD}{color}{text}{RESET}"

    def unreferenced(self, text: str) -> str:
        return self._wrap(text, COLORS['magenta'])

    def out_of_range(self, text: str) -> str:
        return self._wrap(text, COLORS['red'])

    def duplicate(self, text: str) -> str:
        return self._wrap(text, COLORS['yellow'])


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural_form or singular + 's'}"


def format_value(value: Any) -> str:
    """Format a scalar, vector, enum or string the way the report shows it."""
    if isinstance(value, (bool, np.bool_)):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return getattr(value, 'label', value.name)
    if isinstance(value, (float, np.floating)):
        return f"{float(value):g}"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (tuple, list, np.ndarray)):
        return '{' + ', '.join(format_value(v) for v in value) + '}'
    if value is None:
        return 'null'
    return str(value)


def format_size(size: int) -> str:
    return f"{size / 1024:.1f} kB"


def format_data(size: int, flags: DataFlag = DEFAULT_DATA_FLAGS) -> str:
    """Size in kB, plus data flags when they differ from plain owned data."""
    text = format_size(size)
    if flags != DEFAULT_DATA_FLAGS:
        text += ', ' + flag_labels(flags)
    return text


def format_header(category: Category, id: int, name: str = '',
                  references: Optional[int] = None,
                  referenced_by: Tuple[str, str] = ('object', 'objects'),
                  style: Optional[Style] = None) -> str:
    """
    First line of a record: tag, id, optional reference count and name.

    Examples:
        'Mesh 0:'
        'Mesh 1 (referenced by 2 objects): Tree'
    """
    style = style or Style()
    text = f"{category.tag} {id}"
    if references is not None:
        counted = f"(referenced by {plural(references, *referenced_by)})"
        if references == 0:
            counted = style.unreferenced(counted)
        text += ' ' + counted
    text += ':'
    if name:
        text += ' ' + name
    return text


@dataclass
class Entry:
    """Body lines of one record, collected while fetching and rendered later."""
    category: Category
    id: int
    name: str = ''
    lines: List[str] = field(default_factory=list)


class CategoryReporter:
    """
    Turns records of one or more categories into report lines.

    describe() runs right after a successful fetch and must not keep the
    record around. render() runs once all records are fetched, when
    reference counts are final.
    """

    categories: Tuple[Category, ...] = ()
    # Singular and plural noun for the reference count, None if not referenced
    referenced_by: Optional[Tuple[str, str]] = None

    def __init__(self, names: NameResolver, style: Optional[Style] = None,
                 bounds: Optional[BoundsCalculator] = None):
        self.names = names
        self.style = style or Style()
        self.bounds = bounds

    def describe(self, category: Category, id: int, record, level: int = 0) -> List[str]:
        raise NotImplementedError

    def render(self, entry: Entry, analyzer: ReferenceAnalyzer) -> List[str]:
        references = None
        if self.referenced_by is not None:
            references = analyzer.reference_count(entry.category, entry.id)
        lines = [format_header(entry.category, entry.id, entry.name, references,
                               self.referenced_by or ('object', 'objects'), self.style)]
        lines.extend(entry.lines)
        for reference in analyzer.out_of_range_from(entry.category, entry.id):
            lines.append('  ' + self.style.out_of_range(self.describe_out_of_range(reference)))
        return lines

    def describe_out_of_range(self, reference: OutOfRangeReference) -> str:
        return (f"References {reference.target_category.tag} {reference.target} "
                f"out of range of {reference.target_count}")


def duplicate_marker(key, seen: set, style: Style) -> str:
    """Warning suffix for a field or attribute already seen with the same format."""
    if key in seen:
        return ' ' + style.duplicate('(duplicate)')
    seen.add(key)
    return ''
