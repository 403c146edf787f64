import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


WELL = {
    "segments": [
        {"role": "riser", "id": 17.5, "depth": 120},
        {"role": "production", "id": 8.535, "depth": 3000},
        {"role": "casing_x", "id": 5, "depth": 10},
    ],
}


def write_well(tmp_path, payload):
    path = tmp_path / "well.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_prints_volume_table(tmp_path):
    out = StringIO()
    call_command("compute_volumes", write_well(tmp_path, WELL), "--plug-depth", "362", stdout=out)
    text = out.getvalue()
    assert "riser" in text
    assert "production" in text
    assert "Total volume:" in text
    assert "Above POI 362.0 m" in text
    assert "UNKNOWN_ROLE" in text


def test_json_output(tmp_path):
    out = StringIO()
    call_command("compute_volumes", write_well(tmp_path, WELL), "--json", stdout=out)
    data = json.loads(out.getvalue())
    assert data["plug_depth_val"] is None
    assert [e["role"] for e in data["per_casing_volumes"]] == ["riser", "production"]


def test_missing_file(tmp_path):
    with pytest.raises(CommandError):
        call_command("compute_volumes", str(tmp_path / "nope.json"))


def test_payload_without_segments(tmp_path):
    with pytest.raises(CommandError):
        call_command("compute_volumes", write_well(tmp_path, {"options": {}}))
