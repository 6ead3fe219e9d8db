"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and reusable test fixtures.
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from formexport.core.errors import FormNotFoundError
from formexport.core.models import Field, FormSummary, Submission
from formexport.core.repository import DeliverySink, FormStore


class MemoryFormStore(FormStore):
    """Form store holding forms in memory, for tests."""

    def __init__(self):
        self._forms = {}

    def add_form(self, form_id, title="", fields=None, submissions=None):
        self._forms[form_id] = {
            "title": title,
            "fields": list(fields or []),
            "submissions": list(submissions or []),
        }

    def _get(self, form_id):
        if form_id not in self._forms:
            raise FormNotFoundError(form_id)
        return self._forms[form_id]

    def list_forms(self):
        return [FormSummary(id=fid, title=f["title"]) for fid, f in self._forms.items()]

    def get_fields(self, form_id):
        return list(self._get(form_id)["fields"])

    def get_submissions(self, form_id):
        return list(self._get(form_id)["submissions"])

    def get_form_title(self, form_id):
        return self._get(form_id)["title"]


class RecordingSink(DeliverySink):
    """Sink collecting written bytes and the order of begin/write/end calls."""

    def __init__(self):
        self.chunks = []
        self.events = []

    def begin(self):
        self.events.append("begin")

    def write(self, data):
        self.events.append("write")
        self.chunks.append(data)

    def end(self):
        self.events.append("end")

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


class FailingSink(RecordingSink):
    """Sink that rejects the write after a number of successful ones."""

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after

    def write(self, data):
        if len(self.chunks) >= self.fail_after:
            raise OSError(28, "No space left on device")
        super().write(data)


@pytest.fixture
def sample_fields() -> list[Field]:
    """
    Fields of a small contact form.

    Returns:
        Fields in storage order, including a submit button.
    """
    return [
        Field(id=1, type="email", order=2, label="Email"),
        Field(id=2, type="submit", order=1, label="Go"),
        Field(id=3, type="textbox", order=1, label="Name"),
    ]


@pytest.fixture
def sample_submission() -> Submission:
    """
    A submission of the contact form.

    Returns:
        A Submission with values for the name and email fields.
    """
    return Submission(
        id=10,
        submitted_at=datetime(2024, 1, 1, 12, 0, 0),
        sequence_number=1,
        values={1: "a@b.com", 3: "Ann"},
    )


@pytest.fixture
def memory_store(sample_fields, sample_submission) -> MemoryFormStore:
    """
    Create an in-memory store with the contact form as form 5.

    Returns:
        A MemoryFormStore with one form and one submission.
    """
    store = MemoryFormStore()
    store.add_form(5, title="Contact", fields=sample_fields, submissions=[sample_submission])
    return store


@pytest.fixture
def store_document() -> dict:
    """
    A JSON form store document with two forms.

    Returns:
        The document as a dictionary.
    """
    return {
        "forms": [
            {
                "id": 1,
                "title": "Contact Us",
                "fields": [
                    {"id": 1, "type": "email", "order": 2, "label": "Email"},
                    {"id": 2, "type": "submit", "order": 3, "label": "Send"},
                    {"id": 3, "type": "textbox", "order": 1, "label": "Name",
                     "admin_label": "full_name"},
                    {"id": 4, "type": "listcheckbox", "order": 2, "label": "Colors"},
                ],
                "submissions": [
                    {"id": 10, "submitted_at": "2024-01-01 12:00:00", "sequence_number": 1,
                     "values": {"1": "a@b.com", "3": "Ann", "4": "[\"red\", \"blue\"]"}},
                    {"id": 11, "submitted_at": "2024-01-02T08:30:00", "sequence_number": 2,
                     "values": {"3": "Bob; Jr.", "4": ["green"]}},
                ],
            },
            {
                "id": 2,
                "title": "",
                "fields": [],
                "submissions": [],
            },
        ]
    }


@pytest.fixture
def store_file(tmp_path, store_document) -> Path:
    """
    Write the store document to a temporary JSON file.

    Returns:
        Path to the JSON file.
    """
    path = tmp_path / "forms.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(store_document, f)
    return path


@pytest.fixture
def empty_store() -> MemoryFormStore:
    """Create an in-memory store without forms."""
    return MemoryFormStore()


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Create a sink that records everything written to it."""
    return RecordingSink()


@pytest.fixture
def failing_sink_factory():
    """
    Factory for sinks that fail on a given write.

    Returns:
        Callable taking the number of writes to accept before failing.
    """
    return FailingSink
