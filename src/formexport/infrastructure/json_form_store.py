"""
Form store backed by a JSON document.

This module reads forms, fields and submissions from a single JSON file
and builds the core model records from it. The expected layout is:

    {
      "forms": [
        {
          "id": 1,
          "title": "Contact",
          "fields": [
            {"id": 1, "type": "textbox", "order": 1, "label": "Name", "admin_label": ""}
          ],
          "submissions": [
            {"id": 10, "submitted_at": "2024-01-01 12:00:00", "sequence_number": 1,
             "values": {"1": "Ann"}}
          ]
        }
      ]
    }
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..core.errors import FormNotFoundError, FormStoreError
from ..core.models import Field, FormSummary, Submission
from ..core.repository import FormStore
from .logging_config import get_logger

logger = get_logger(__name__)


DATE_FORMATS = ('%Y-%m-%d %H:%M:%S', '%Y-%m-%d')


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored submission timestamp.

    Accepts 'YYYY-MM-DD HH:MM:SS', 'YYYY-MM-DD' and ISO-8601 strings.

    Args:
        value: The stored timestamp, or None.

    Returns:
        The parsed datetime, or None if value is empty.

    Raises:
        ValueError: If value cannot be parsed.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return datetime.fromisoformat(text)


def _to_int(value: Any, default: int = 0) -> int:
    """Convert an order hint to int, using default for unusable values."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class JsonFormStore(FormStore):
    """
    Reads forms and submissions from a JSON file.

    The file is read once, on first access. Every query builds fresh model
    objects, so callers may keep or discard them freely.
    """

    def __init__(self, path: Path):
        """
        Initialize the store with the path of its JSON document.

        Args:
            path: Path to the JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        self.path = Path(path)
        self._forms: Optional[dict[int, dict]] = None

        if not self.path.exists():
            raise FileNotFoundError(f"Form store file does not exist: {self.path}")

    def _load(self) -> dict[int, dict]:
        if self._forms is not None:
            return self._forms

        logger.info(f"Loading forms from: {self.path}")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise FormStoreError(f"Invalid JSON in {self.path}: {e}") from e
        except OSError as e:
            raise FormStoreError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get('forms'), list):
            raise FormStoreError(f"Expected an object with a 'forms' list in {self.path}")

        forms = {}
        for raw_form in document['forms']:
            if not isinstance(raw_form, dict) or 'id' not in raw_form:
                raise FormStoreError(f"Form entry without id in {self.path}")
            form_id = _to_int(raw_form['id'], default=-1)
            if form_id < 0:
                raise FormStoreError(f"Invalid form id {raw_form['id']!r} in {self.path}")
            forms[form_id] = raw_form

        logger.debug(f"Found {len(forms)} forms")
        self._forms = forms
        return forms

    def _get_form(self, form_id: int) -> dict:
        form = self._load().get(form_id)
        if form is None:
            raise FormNotFoundError(form_id)
        return form

    def list_forms(self) -> list[FormSummary]:
        return [
            FormSummary(id=form_id, title=str(raw.get('title') or ''))
            for form_id, raw in self._load().items()
        ]

    def has_form(self, form_id: int) -> bool:
        return form_id in self._load()

    def get_form_title(self, form_id: int) -> str:
        return str(self._get_form(form_id).get('title') or '')

    def get_fields(self, form_id: int) -> list[Field]:
        form = self._get_form(form_id)
        return [self._parse_field(form_id, raw) for raw in form.get('fields') or []]

    def get_submissions(self, form_id: int) -> list[Submission]:
        form = self._get_form(form_id)
        return [self._parse_submission(form_id, raw) for raw in form.get('submissions') or []]

    def _parse_field(self, form_id: int, raw: dict) -> Field:
        if not isinstance(raw, dict) or 'id' not in raw:
            raise FormStoreError(f"Field without id in form {form_id}")

        return Field(
            id=raw['id'],
            type=str(raw.get('type') or 'unknown'),
            order=_to_int(raw.get('order')),
            label=str(raw.get('label') or ''),
            admin_label=str(raw.get('admin_label') or ''),
        )

    def _parse_submission(self, form_id: int, raw: dict) -> Submission:
        if not isinstance(raw, dict) or 'id' not in raw:
            raise FormStoreError(f"Submission without id in form {form_id}")

        try:
            submitted_at = parse_timestamp(raw.get('submitted_at'))
        except ValueError as e:
            raise FormStoreError(
                f"Invalid submission date {raw.get('submitted_at')!r} "
                f"for submission {raw['id']} in form {form_id}"
            ) from e

        values = raw.get('values') or {}
        if not isinstance(values, dict):
            logger.debug(f"Ignoring non-object values of submission {raw['id']}")
            values = {}

        return Submission(
            id=raw['id'],
            submitted_at=submitted_at,
            sequence_number=raw.get('sequence_number'),
            values={str(k): v for k, v in values.items()},
        )
