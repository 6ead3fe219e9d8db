"""
Integration tests for exporting from a JSON form store to a file.

Tests the complete workflow of loading a store and writing an export.
"""

import csv
import io
import json
from datetime import date

import pytest

from formexport.core.export import export_form, suggest_filename
from formexport.core.models import ExportSpec
from formexport.core.table_encoder import BOM
from formexport.infrastructure.json_form_store import JsonFormStore
from formexport.infrastructure.sinks import FileSink


@pytest.fixture
def scenario_store(tmp_path):
    """
    Create a store with a form mixing exportable and structural fields.
    """
    document = {
        "forms": [{
            "id": 3,
            "title": "Survey: Spring / 2024",
            "fields": [
                {"id": 1, "type": "textbox", "order": 2, "label": "Email"},
                {"id": 2, "type": "submit", "order": 1, "label": "Go"},
                {"id": 3, "type": "textbox", "order": 1, "label": "Name"},
                {"id": 4, "type": "html", "order": 0, "label": "Intro"},
                {"id": 5, "type": "listcheckbox", "order": 3, "label": "Colors",
                 "admin_label": "colors"},
                {"id": 6, "type": "textarea", "order": 4, "label": ""},
            ],
            "submissions": [
                {"id": 10, "submitted_at": "2024-01-01 12:00:00", "sequence_number": 1,
                 "values": {"1": "a@b.com", "3": "Ann", "5": "[\"red\",\"blue\"]",
                            "6": "Said \"hi\"\nthen left"}},
                {"id": 12, "submitted_at": "2024-02-15 09:41:07", "sequence_number": 2,
                 "values": {"3": "Åse", "5": "[broken", "99": "orphan"}},
            ],
        }]
    }
    path = tmp_path / "forms.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return JsonFormStore(path)


def test_export_to_file(scenario_store, tmp_path):
    """Test a full export through the JSON store and a file sink."""
    target = tmp_path / suggest_filename(3, scenario_store.get_form_title(3), date(2024, 3, 1))

    with FileSink(target) as sink:
        stats = export_form(scenario_store, ExportSpec(form_id=3, separator=";"), sink)

    assert target.name == "export-Survey-Spring-2024-2024-03-01.csv"
    data = target.read_bytes()
    assert data.startswith(BOM)
    assert stats.byte_count == len(data)
    assert stats.row_count == 2

    rows = list(csv.reader(io.StringIO(data.decode("utf-8-sig"), newline=""), delimiter=";"))
    assert rows == [
        ["Submission ID", "Date", "Seq #", "Name", "Email", "colors", "6"],
        ["10", "2024-01-01 12:00:00", "1", "Ann", "a@b.com", "red, blue", 'Said "hi"\nthen left'],
        ["12", "2024-02-15 09:41:07", "2", "Åse", "", "[broken", ""],
    ]


def test_concrete_scenario_bytes(scenario_store, tmp_path):
    """Test the exact bytes of the header and first row."""
    target = tmp_path / "out.csv"

    with FileSink(target) as sink:
        export_form(scenario_store, ExportSpec(form_id=3, separator=";"), sink,
                    hidden_types=lambda: ["listcheckbox", "textarea"])

    lines = target.read_bytes()[len(BOM):].split(b"\r\n")
    assert lines[0] == b"Submission ID;Date;Seq #;Name;Email"
    assert lines[1] == b"10;2024-01-01 12:00:00;1;Ann;a@b.com"
