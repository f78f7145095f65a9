"""
Test plutus.json generation and updates.
"""

import json

import pytest

from aikscript.core.config import ProjectSettings
from aikscript.core.errors import ManifestUpdateError
from aikscript.output.manifest import generate_plutus_json, update_plutus_json


def write_blueprint(tmp_path, name="demo"):
    path = tmp_path / "plutus.json"
    path.write_text(generate_plutus_json(name), encoding="utf-8")
    return path


def test_generate_plutus_json():
    """New blueprints list the placeholder validator and the Data schema."""
    blueprint = json.loads(generate_plutus_json("demo", ProjectSettings(plutus="v3", compiler="v1.1.19")))

    assert blueprint["preamble"]["title"] == "demo"
    assert blueprint["preamble"]["plutusVersion"] == "v3"
    assert blueprint["preamble"]["compiler"] == {"name": "Aiken", "version": "v1.1.19"}
    assert [v["title"] for v in blueprint["validators"]] == ["placeholder.placeholder.mint"]
    assert blueprint["validators"][0]["datum"]["title"] == "_datum"
    assert "Data" in blueprint["definitions"]


def test_generate_uses_two_space_indent():
    """Blueprint text is indented by two spaces."""
    assert '\n  "preamble": {' in generate_plutus_json("demo")


def test_update_appends_new_contract(tmp_path):
    """A contract not yet listed is appended."""
    path = write_blueprint(tmp_path)
    blueprint = update_plutus_json(str(path), "hello_world", "validators/hello_world.ak")

    titles = [v["title"] for v in blueprint["validators"]]
    assert titles == ["placeholder.placeholder.mint", "hello_world.spend"]
    assert json.loads(path.read_text(encoding="utf-8")) == blueprint


def test_update_replaces_matching_contract(tmp_path):
    """A listed contract is replaced in place, not duplicated."""
    path = write_blueprint(tmp_path)
    update_plutus_json(str(path), "hello_world", "validators/old.ak")
    blueprint = update_plutus_json(str(path), "hello_world", "validators/hello_world.ak")

    entries = [v for v in blueprint["validators"] if "hello_world" in v["title"]]
    assert len(entries) == 1
    assert entries[0]["compiledCode"] == "validators/hello_world.ak"


def test_missing_file_raises(tmp_path):
    """Missing blueprints raise ManifestUpdateError."""
    with pytest.raises(ManifestUpdateError):
        update_plutus_json(str(tmp_path / "plutus.json"), "hello_world", "x.ak")


def test_invalid_json_raises(tmp_path):
    """Unparseable blueprints raise ManifestUpdateError and are left as they were."""
    path = tmp_path / "plutus.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestUpdateError):
        update_plutus_json(str(path), "hello_world", "x.ak")
    assert path.read_text(encoding="utf-8") == "{not json"
