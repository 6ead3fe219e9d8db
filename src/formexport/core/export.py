"""
Export of form submissions to a delimited document.

This module wires the pipeline stages together: the field selector decides
the columns, the row projector turns each submission into a row, and the
table encoder streams the rows to a delivery sink.
"""

from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from .errors import MissingFormError
from .field_selector import build_exclusion_set, build_header, select_and_order
from .models import ExportSpec, ExportStats, Field, Submission
from .repository import DeliverySink, FormStore
from .row_projector import build_row
from .table_encoder import encode, validate_separator
from ..infrastructure.logging_config import get_logger
from ..infrastructure.paths import sanitize_filename

logger = get_logger(__name__)


DEFAULT_SEPARATOR = ','

HiddenTypesProvider = Callable[[], Iterable[str]]
"""Callback returning additional field types to leave out of the export."""


def resolve_separator(raw: Optional[str], default: str = DEFAULT_SEPARATOR) -> str:
    """
    Pick the separator to use for a user-supplied value.

    Anything other than exactly one character falls back to the default.
    This is a convenience for front ends; the pipeline itself rejects
    invalid separators instead of replacing them.

    Args:
        raw: The separator as entered by the user, possibly None.
        default: Separator to use when raw is unusable.

    Returns:
        raw if it is a single character, otherwise default.
    """
    if raw is not None and len(raw) == 1:
        return raw
    if raw:
        logger.debug(f"Separator {raw!r} is not a single character, using {default!r}")
    return default


def suggest_filename(form_id: int, title: str = "", on_date: Optional[date] = None) -> str:
    """
    Suggest a file name for an export.

    Args:
        form_id: The exported form.
        title: The form title; used when it sanitizes to something non-empty.
        on_date: Date stamp for the name. Defaults to today.

    Returns:
        A name like 'export-contact-us-2024-01-31.csv'.
    """
    if on_date is None:
        on_date = date.today()

    name = sanitize_filename(title or "")
    if not name:
        name = f"form-{form_id}"

    return f"export-{name}-{on_date.isoformat()}.csv"


def build_table(
    fields: Iterable[Field],
    submissions: Iterable[Submission],
    excluded_types: Iterable[str]
) -> tuple[list[str], Iterator[list[str]]]:
    """
    Build the header and a lazy row iterator for an export.

    Args:
        fields: All fields of the form.
        submissions: Submissions in export order.
        excluded_types: Field types to leave out.

    Returns:
        Tuple of (header, rows). Rows are produced on demand.
    """
    selected = select_and_order(fields, excluded_types)
    header = build_header(selected)
    field_ids = [f.id for f in selected]

    rows = (build_row(submission, field_ids) for submission in submissions)
    return header, rows


def _check_form_selected(form_id: Optional[int]) -> None:
    if not form_id:
        raise MissingFormError("Please select a form to export")


def _excluded_types(hidden_types: Optional[HiddenTypesProvider]) -> frozenset[str]:
    additional = hidden_types() if hidden_types is not None else None
    return build_exclusion_set(additional)


def get_export_header(
    store: FormStore,
    form_id: int,
    hidden_types: Optional[HiddenTypesProvider] = None
) -> list[str]:
    """
    Get the header row an export of a form would have.

    Args:
        store: Source of the form definition.
        form_id: The form to inspect.
        hidden_types: Optional callback returning extra types to hide.

    Returns:
        The header row.

    Raises:
        MissingFormError: If no form id is given.
        FormNotFoundError: If the form does not exist.
    """
    _check_form_selected(form_id)
    fields = select_and_order(store.get_fields(form_id), _excluded_types(hidden_types))
    return build_header(fields)


def export_form(
    store: FormStore,
    spec: ExportSpec,
    sink: DeliverySink,
    hidden_types: Optional[HiddenTypesProvider] = None
) -> ExportStats:
    """
    Export all submissions of a form to a sink.

    The configuration is validated before the sink is touched. Once writing
    has started, errors raised by the sink propagate unchanged and bytes
    already written are left in place.

    Args:
        store: Source of fields and submissions.
        spec: The form to export and the separator to use.
        sink: Destination for the encoded document.
        hidden_types: Optional callback returning extra field types to
            leave out, merged with the built-in skip-list.

    Returns:
        ExportStats describing the written document.

    Raises:
        MissingFormError: If spec has no form id.
        InvalidSeparatorError: If spec.separator is not usable.
        FormNotFoundError: If the form does not exist.
    """
    _check_form_selected(spec.form_id)
    validate_separator(spec.separator)

    excluded = _excluded_types(hidden_types)
    fields = store.get_fields(spec.form_id)
    submissions = store.get_submissions(spec.form_id)

    header, rows = build_table(fields, submissions, excluded)
    stats = ExportStats(column_count=len(header))

    def counted(source: Iterator[list[str]]) -> Iterator[list[str]]:
        for row in source:
            stats.row_count += 1
            yield row

    logger.debug(
        f"Exporting form {spec.form_id}: {len(header)} columns, "
        f"{len(submissions)} submissions, separator {spec.separator!r}"
    )

    sink.begin()
    stats.byte_count = encode(header, counted(rows), spec.separator, sink)
    sink.end()

    logger.info(
        f"Exported {stats.row_count} submissions of form {spec.form_id} "
        f"({stats.get_size_string()})"
    )
    return stats
