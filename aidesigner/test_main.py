"""Tests for the aidesigner CLI."""

import json

import pytest

from aidesigner.__main__ import main


@pytest.fixture
def document_file(tmp_path, kit_host):
    path = tmp_path / "document.json"
    path.write_text(json.dumps(kit_host.to_dict()))
    return path


@pytest.fixture
def catalog_file(tmp_path, kit_catalog):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(kit_catalog.to_json_list()))
    return path


@pytest.mark.unit
def test_no_command(capsys):
    assert main([]) == 1


@pytest.mark.unit
def test_classify(capsys):
    assert main(["classify", "Button", "Nav Bar"]) == 0
    out = capsys.readouterr().out
    assert "'Button': button" in out


@pytest.mark.unit
def test_schema(tmp_path):
    output = tmp_path / "schema.json"
    assert main(["schema", "-o", str(output)]) == 0
    schema = json.loads(output.read_text())
    assert "layoutContainer" in schema["properties"]


@pytest.mark.unit
def test_validate_rejects_bad_layout(tmp_path):
    layout = tmp_path / "layout.json"
    layout.write_text("{not json")
    assert main(["validate", str(layout)]) == 1


@pytest.mark.unit
def test_validate(tmp_path, login_layout):
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps(login_layout))
    assert main(["validate", str(layout)]) == 0


@pytest.mark.integration
def test_scan(tmp_path, document_file):
    output = tmp_path / "catalog.json"
    assert main(["scan", str(document_file), "-o", str(output)]) == 0

    ids = [component["id"] for component in json.loads(output.read_text())]
    assert {"10:1", "10:2", "10:3"} <= set(ids)
    assert "10:9" not in ids


@pytest.mark.unit
def test_resolve_placeholder(tmp_path, catalog_file):
    layout = tmp_path / "layout.json"
    layout.write_text(
        json.dumps(
            {
                "layoutContainer": {"name": "Screen"},
                "items": [{"type": "button", "componentNodeId": "button_id"}],
            }
        )
    )
    output = tmp_path / "resolved.json"

    assert main(["resolve", str(layout), "-c", str(catalog_file), "-o", str(output)]) == 0
    resolved = json.loads(output.read_text())
    assert resolved["items"][0]["componentNodeId"] == "10:2"


@pytest.mark.integration
def test_render(tmp_path, document_file, catalog_file, login_layout):
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps(login_layout))
    output = tmp_path / "rendered.json"

    code = main(
        [
            "render",
            str(document_file),
            str(layout),
            "-c",
            str(catalog_file),
            "-o",
            str(output),
        ]
    )

    assert code == 0
    snapshot = json.loads(output.read_text())
    screens = next(page for page in snapshot["pages"] if page["name"] == "Screens")
    assert [child["name"] for child in screens["children"]] == ["Login"]


@pytest.mark.unit
def test_prompt(capsys, catalog_file):
    assert main(["prompt", "-c", str(catalog_file)]) == 0
    assert "### BUTTON" in capsys.readouterr().out


@pytest.mark.unit
def test_generate_without_key(monkeypatch, catalog_file):
    monkeypatch.delenv("LLM_PROVIDER", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    assert main(["generate", "login screen", "-c", str(catalog_file)]) == 1
