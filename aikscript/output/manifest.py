"""
plutus.json blueprint generation and updates.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import ProjectSettings
from ..core.errors import ManifestUpdateError

DATA_SCHEMA_REF = "#/definitions/Data"


def _data_field(title: str) -> Dict[str, Any]:
    return {"title": title, "schema": {"$ref": DATA_SCHEMA_REF}}


def validator_entry(title: str, compiled_path: str,
                    datum_title: str = "datum", redeemer_title: str = "redeemer") -> Dict[str, Any]:
    """A blueprint validator entry with Data datum and redeemer schemas"""
    return {
        "title": title,
        "datum": _data_field(datum_title),
        "redeemer": _data_field(redeemer_title),
        "compiledCode": compiled_path,
        "parameters": []
    }


def generate_plutus_json(project_name: str, settings: Optional[ProjectSettings] = None) -> str:
    """
    Initial blueprint for a new project, listing the placeholder validator.

    Returns:
        JSON text with two-space indentation
    """
    settings = settings or ProjectSettings()
    blueprint = {
        "preamble": {
            "title": project_name,
            "description": f"Aiken contracts for project '{project_name}'",
            "version": "0.0.0",
            "plutusVersion": settings.plutus,
            "compiler": {
                "name": "Aiken",
                "version": settings.compiler
            },
            "license": settings.license
        },
        "validators": [
            validator_entry(
                "placeholder.placeholder.mint",
                "validators/placeholder.ak",
                datum_title="_datum",
                redeemer_title="_redeemer"
            )
        ],
        "definitions": {
            "Data": {
                "title": "Data",
                "description": "Any Plutus data."
            }
        }
    }
    return json.dumps(blueprint, indent=2)


def update_plutus_json(plutus_json_path: str, contract_name: str, compiled_path: str) -> Dict[str, Any]:
    """
    Record a compiled contract in an existing plutus.json.

    The first validator whose title contains `contract_name` is replaced,
    otherwise a new entry is appended.

    Returns:
        The updated blueprint

    Raises:
        ManifestUpdateError: If the file cannot be read, parsed or written
    """
    path = Path(plutus_json_path)
    try:
        blueprint = json.loads(path.read_text(encoding="utf-8"))
        validators = blueprint.setdefault("validators", [])
        entry = validator_entry(f"{contract_name}.spend", compiled_path)

        for index, existing in enumerate(validators):
            if contract_name in (existing.get("title") or ""):
                validators[index] = entry
                break
        else:
            validators.append(entry)

        path.write_text(json.dumps(blueprint, indent=2), encoding="utf-8")
    except (OSError, ValueError, AttributeError, TypeError) as e:
        raise ManifestUpdateError(f"Could not update plutus.json: {e}") from e

    return blueprint
