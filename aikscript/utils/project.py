"""
Scaffolding for new Aiken projects with Python contract sources
"""

import json
import logging
import os
from typing import List, Optional

from ..core.config import ProjectSettings
from ..output.manifest import generate_plutus_json
from .files import ensure_directory_exists, write_text

logger = logging.getLogger(__name__)

PROJECT_DIRS = [
    "env",
    "lib",
    "python/lib",
    "python/validators",
    "validators",
    "build/packages",
    ".github/workflows"
]

GITIGNORE = """# Aiken compilation artifacts
artifacts/
# Aiken's project working directory
build/
# Aiken's default documentation export
docs/
# Python
__pycache__/
"""

PLACEHOLDER_VALIDATOR = """use cardano/assets.{PolicyId}
use cardano/transaction.{Transaction}

validator placeholder {
  mint(_redeemer: Data, _policy_id: PolicyId, _transaction: Transaction) {
    True
  }
}
"""

EXAMPLE_CONTRACT = '''"""
Hello world spend validator
"""

from typing import Annotated

from aikscript import contract, datum, expect, validator
import aiken.collection.list
from cardano.transaction import OutputReference, Transaction


class Datum:
    owner: bytes


class Redeemer:
    msg: bytes


@contract("hello_world")
class HelloWorld:
    state: Annotated[Datum, datum]

    @validator("spend")
    def spend(self, datum: Datum, redeemer: Redeemer,
              output_reference: OutputReference, transaction: Transaction) -> bool:
        owner = expect(datum, "Datum required").owner
        must_say_hello = redeemer.msg == b"Hello, World!"
        return must_say_hello and owner in transaction.extra_signatories
'''


def toml_string(value: str) -> str:
    """A TOML basic string; JSON string escapes are valid TOML escapes"""
    return json.dumps(str(value), ensure_ascii=False)


def generate_aiken_toml(project_name: str, settings: Optional[ProjectSettings] = None) -> str:
    settings = settings or ProjectSettings()
    description = f"Aiken contracts for project '{project_name}'"
    lines = [
        f"name = {toml_string(project_name)}",
        'version = "0.0.0"',
        f"compiler = {toml_string(settings.compiler)}",
        f"plutus = {toml_string(settings.plutus)}",
        f"license = {toml_string(settings.license)}",
        f"description = {toml_string(description)}",
        "",
        "[repository]",
        'user = "your-username"',
        f"project = {toml_string(project_name)}",
        'platform = "github"',
        "",
        "[[dependencies]]",
        'name = "aiken-lang/stdlib"',
        f"version = {toml_string(settings.stdlib)}",
        'source = "github"',
        ""
    ]
    for dependency in settings.extra_dependencies:
        lines.extend([
            "[[dependencies]]",
            f"name = {toml_string(dependency['name'])}",
            f"version = {toml_string(dependency['version'])}",
            f"source = {toml_string(dependency.get('source', 'github'))}",
            ""
        ])
    lines.extend(["[config]", ""])
    return "\n".join(lines)


def generate_readme(project_name: str) -> str:
    return f"""# {project_name}

Write validators in the `validators` folder, and supporting functions in the `lib` folder using `.ak` as a file extension.

Python contracts live in `python/lib/` and are compiled to Aiken with AikScript:

```sh
aikscript compile python/lib/hello_world.py -o validators/hello_world.ak
aiken check
aiken build
```

## Configuring

Edit `aiken.toml` to configure your project.
"""


def generate_ci_workflow(settings: Optional[ProjectSettings] = None) -> str:
    settings = settings or ProjectSettings()
    return f"""name: Continuous Integration

on:
  push:
    branches: ["main"]
  pull_request:

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v3
      - uses: aiken-lang/setup-aiken@v1
        with:
          version: {settings.compiler}
      - run: aiken fmt --check
      - run: aiken check -D
      - run: aiken build
"""


def init_project(project_name: str, parent: str = ".",
                 settings: Optional[ProjectSettings] = None) -> List[str]:
    """
    Create a new project directory.

    Args:
        project_name: Directory and Aiken project name
        parent: Directory the project is created in
        settings: Version pins (defaults to ProjectSettings.from_env())

    Returns:
        Paths of the files written

    Raises:
        FileExistsError: If the project directory already exists
    """
    settings = settings or ProjectSettings.from_env()
    project_path = os.path.abspath(os.path.join(parent, project_name))
    if os.path.exists(project_path):
        raise FileExistsError(f"Directory {project_name} already exists")

    for directory in PROJECT_DIRS:
        ensure_directory_exists(os.path.join(project_path, directory))

    files = {
        "aiken.toml": generate_aiken_toml(project_name, settings),
        "plutus.json": generate_plutus_json(project_name, settings),
        ".gitignore": GITIGNORE,
        "README.md": generate_readme(project_name),
        ".github/workflows/continuous-integration.yml": generate_ci_workflow(settings),
        "validators/placeholder.ak": PLACEHOLDER_VALIDATOR,
        "python/lib/hello_world.py": EXAMPLE_CONTRACT
    }

    written = []
    for relative, content in files.items():
        written.append(write_text(os.path.join(project_path, relative), content))
    logger.info("Created project %s at %s", project_name, project_path)
    return written
