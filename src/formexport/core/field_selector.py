"""
Selection and ordering of exportable form fields.

Layout elements, buttons, anti-spam widgets, payment card inputs and
password confirmations carry no submitted data worth exporting. They are
listed in SKIP_FIELD_TYPES; callers may hide additional types.
"""

from typing import Iterable, Optional

from .models import Field
from ..infrastructure.logging_config import get_logger

logger = get_logger(__name__)


SKIP_FIELD_TYPES = frozenset({
    'submit',
    'html',
    'hr',
    'recaptcha',
    'spam',
    'unknown',
    'note',
    'confirm',
    'password',
    'passwordconfirm',
    'creditcard',
    'creditcardcvc',
    'creditcardexpiration',
    'creditcardfullname',
    'creditcardnumber',
    'creditcardzip',
    'hcaptcha',
    'turnstile',
})

LEADING_COLUMNS = ('Submission ID', 'Date', 'Seq #')
"""Header labels of the fixed columns preceding the field columns."""


def build_exclusion_set(additional_types: Optional[Iterable[str]] = None) -> frozenset[str]:
    """
    Merge the static skip-list with externally supplied hidden field types.

    Args:
        additional_types: Extra type tags to hide, or None.

    Returns:
        The union of SKIP_FIELD_TYPES and additional_types.
    """
    if not additional_types:
        return SKIP_FIELD_TYPES
    return SKIP_FIELD_TYPES | frozenset(additional_types)


def select_and_order(fields: Iterable[Field], excluded_types: Iterable[str]) -> list[Field]:
    """
    Filter fields down to exportable ones and put them in column order.

    Fields are sorted ascending by their order hint. The sort is stable,
    so fields sharing an order value keep their original relative order.

    Args:
        fields: All fields of a form.
        excluded_types: Type tags that must not be exported.

    Returns:
        The exportable fields in export column order. May be empty.
    """
    excluded = set(excluded_types)
    fields = list(fields)

    selected = [f for f in fields if f.type not in excluded]
    selected.sort(key=lambda f: f.order)

    logger.debug(f"Selected {len(selected)} of {len(fields)} fields for export")
    return selected


def column_label(field: Field) -> str:
    """
    Get the header label for a field column.

    Args:
        field: The field.

    Returns:
        The admin label if set, else the label, else the field id as text.
    """
    if field.admin_label:
        return field.admin_label
    if field.label:
        return field.label
    return str(field.id)


def build_header(fields: Iterable[Field]) -> list[str]:
    """
    Build the header row for an export.

    Args:
        fields: Selected fields in column order.

    Returns:
        The fixed leading column labels followed by one label per field.
    """
    return list(LEADING_COLUMNS) + [column_label(f) for f in fields]
