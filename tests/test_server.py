"""
Test the AikScript HTTP API.
"""

from fastapi.testclient import TestClient

from aikscript import __version__
from aikscript.server.app import app

client = TestClient(app)

CONTRACT = '''
"""Token policy"""

from cardano.assets import PolicyId


@contract("token")
class Token:
    @validator("mint")
    def mint(self, redeemer):
        return True


def test_policy():
    return True
'''


def test_health():
    """Health check reports the package version."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_transpile():
    """Transpile returns the Aiken module."""
    response = client.post("/api/transpile", json={"source": "MAX_SIZE = 10\n"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"]
    assert data["aiken"] == "pub const max_size: Int = 10\n"
    assert data["error"] is None


def test_transpile_without_docs():
    """emit_docs=False drops doc comments."""
    response = client.post("/api/transpile", json={"source": CONTRACT, "emit_docs": False})
    data = response.json()
    assert data["success"]
    assert "////" not in data["aiken"]
    assert "mint(redeemer: Data, policy_id: PolicyId, transaction: Transaction) {" in data["aiken"]


def test_transpile_error():
    """Invalid source is reported in the body, not as an HTTP error."""
    response = client.post("/api/transpile", json={"source": "def broken(:\n"})
    assert response.status_code == 200
    data = response.json()
    assert not data["success"]
    assert data["aiken"] is None
    assert data["error"]


def test_parse_summary():
    """Parse lists the canonical declarations of a module."""
    response = client.post("/api/parse", json={"source": CONTRACT, "module_name": "token"})
    data = response.json()
    assert data["success"]

    module = data["module"]
    assert module["module_name"] == "token"
    assert module["imports"] == ["cardano/assets"]
    assert module["tests"] == ["test_policy"]
    assert module["validators"] == [{
        "contract": "token",
        "purpose": "mint",
        "parameters": ["redeemer", "policy_id", "transaction"]
    }]


def test_parse_error():
    """Parse failures carry the error message."""
    data = client.post("/api/parse", json={"source": "class :\n"}).json()
    assert not data["success"]
    assert data["module"] is None
