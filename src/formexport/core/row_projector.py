"""
Projection of submissions onto export rows.

Each submission becomes one row of text values aligned with the header
built by field_selector. Composite values (lists of selected choices) are
flattened to a single comma-separated string. Missing or malformed data
never raises; it degrades to an empty string or to the raw text.
"""

import json
from typing import Any, Iterable, Sequence

from .models import FieldId, Submission
from ..infrastructure.logging_config import get_logger

logger = get_logger(__name__)


LIST_JOIN = ', '
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _scalar_text(value: Any) -> str:
    """Render a single non-list value as text."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return '1' if value else ''
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        # Opaque composite; keep it readable rather than guessing a flattening
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _join_list(items: Sequence[Any]) -> str:
    return LIST_JOIN.join(_scalar_text(item) for item in items)


def _decode_serialized_list(raw: str):
    """
    Decode a list serialized as JSON text.

    Returns:
        The decoded list, or None if raw is not a serialized list.
    """
    text = raw.strip()
    if not text.startswith('['):
        return None
    try:
        decoded = json.loads(text)
    except ValueError:
        logger.debug(f"Treating malformed serialized value as text: {raw!r}")
        return None
    if not isinstance(decoded, list):
        return None
    return decoded


def normalize_value(raw: Any) -> str:
    """
    Normalize a raw stored value to its display text.

    - None becomes an empty string.
    - Lists and tuples are joined with ', '.
    - Strings holding a JSON array are decoded and joined the same way;
      anything else in a string is passed through unchanged.
    - Mappings are opaque and rendered as JSON text.
    - Other scalars are converted with str(); booleans become '1' or ''.

    Args:
        raw: The value as stored with the submission.

    Returns:
        The display text for the export cell.
    """
    if isinstance(raw, (list, tuple)):
        return _join_list(raw)
    if isinstance(raw, str):
        decoded = _decode_serialized_list(raw)
        if decoded is not None:
            return _join_list(decoded)
        return raw
    return _scalar_text(raw)


def project(submission: Submission, ordered_field_ids: Iterable[FieldId]) -> list[str]:
    """
    Map a submission to its field values in column order.

    Args:
        submission: The submission to project.
        ordered_field_ids: Field ids in export column order.

    Returns:
        One text value per field id, in the same order.
    """
    return [normalize_value(submission.get_value(fid)) for fid in ordered_field_ids]


def format_date(submission: Submission) -> str:
    """Format the submission timestamp as YYYY-MM-DD HH:MM:SS."""
    if submission.submitted_at is None:
        return ''
    return submission.submitted_at.strftime(DATE_FORMAT)


def build_row(submission: Submission, ordered_field_ids: Sequence[FieldId]) -> list[str]:
    """
    Build a complete data row for a submission.

    The row starts with the submission id, the submission date and the
    sequence number, followed by the projected field values.

    Args:
        submission: The submission to export.
        ordered_field_ids: Field ids in export column order.

    Returns:
        The row values, aligned with the export header.
    """
    leading = [
        _scalar_text(submission.id),
        format_date(submission),
        _scalar_text(submission.sequence_number),
    ]
    return leading + project(submission, ordered_field_ids)
