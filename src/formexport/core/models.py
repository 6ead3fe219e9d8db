"""
Core domain models for form exports.

This module contains pure data models representing forms, fields and
submissions. The records are plain, flat snapshots handed over by a form
store; the export pipeline only reads them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union


FieldId = Union[int, str]
"""Field identifiers are opaque; stores may use integers or strings."""


def field_key(field_id: FieldId) -> str:
    """
    Normalize a field identifier for lookups.

    Submission value mappings loaded from JSON always use string keys,
    so identifiers are compared by their text form.

    Args:
        field_id: The field identifier.

    Returns:
        The identifier as a string.
    """
    return str(field_id)


@dataclass(frozen=True)
class Field:
    """Represents one form-defined input."""

    id: FieldId
    """Unique identifier within the form, stable across submissions."""

    type: str
    """Category tag (e.g., 'textbox', 'listcheckbox', 'submit', 'html')."""

    order: int = 0
    """Position hint set by the form designer. Not unique or contiguous."""

    label: str = ""
    """Display label shown on the form."""

    admin_label: str = ""
    """Administrative label; preferred over label when non-empty."""


@dataclass
class Submission:
    """Represents one completed form entry."""

    id: Any
    """Unique submission identifier."""

    submitted_at: Optional[datetime]
    """Time the entry was submitted, if recorded."""

    sequence_number: Any = None
    """Per-form ordinal assigned at submission time."""

    values: dict[str, Any] = field(default_factory=dict)
    """Mapping from field id to the raw stored value.

    Values may be scalars, lists, or lists serialized as JSON text.
    A field may be absent entirely (added after submission, hidden by
    conditional logic).
    """

    def get_value(self, field_id: FieldId) -> Any:
        """
        Get the raw stored value for a field.

        Args:
            field_id: The field identifier.

        Returns:
            The raw value, or None if the submission has no value for it.
        """
        if field_id in self.values:
            return self.values[field_id]
        key = field_key(field_id)
        for stored_id, value in self.values.items():
            if field_key(stored_id) == key:
                return value
        return None


@dataclass(frozen=True)
class FormSummary:
    """Identifier and title of a form available for export."""

    id: int
    title: str = ""


@dataclass(frozen=True)
class ExportSpec:
    """
    Parameters that fully determine one export.

    Constructed once per export request; see core.export.
    """

    form_id: int
    """The selected form."""

    separator: str = ","
    """Single-character field separator."""


@dataclass
class ExportStats:
    """
    Statistics about a finished export.
    """

    row_count: int = 0
    """Number of data rows written (excluding the header)."""

    column_count: int = 0
    """Number of columns per row, including the fixed leading columns."""

    byte_count: int = 0
    """Total size in bytes, including the byte-order mark."""

    def get_size_string(self) -> str:
        """Get human-readable size string."""
        if self.byte_count < 1024:
            return f"{self.byte_count} B"
        elif self.byte_count < 1024 ** 2:
            return f"{self.byte_count / 1024:.1f} KB"
        elif self.byte_count < 1024 ** 3:
            return f"{self.byte_count / (1024 ** 2):.1f} MB"
        else:
            return f"{self.byte_count / (1024 ** 3):.2f} GB"
