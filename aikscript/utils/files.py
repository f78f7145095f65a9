"""
File I/O utilities
"""

import os
from typing import Optional

AIKEN_EXTENSION = ".ak"
LIB_DIR = "lib"
VALIDATORS_DIR = "validators"


def ensure_directory_exists(dir_path: str) -> None:
    os.makedirs(dir_path, exist_ok=True)


def resolve_output_path(input_path: str,
                        custom_output: Optional[str] = None,
                        cwd: Optional[str] = None) -> str:
    """
    Decide where the Aiken file for a source file goes.

    Args:
        input_path: Python source file
        custom_output: Explicit output path, used as-is when given
        cwd: Project root (defaults to the current directory)

    Returns:
        Absolute output path:
            - <cwd>/validators/<path relative to lib>.ak for sources under <cwd>/lib/
            - <input dir>/validators/<stem>.ak otherwise
    """
    if custom_output:
        return os.path.abspath(custom_output)

    root = os.path.abspath(cwd or os.getcwd())
    source = os.path.abspath(input_path)
    lib_dir = os.path.join(root, LIB_DIR)

    relative = os.path.relpath(source, lib_dir)
    if not relative.startswith(os.pardir) and not os.path.isabs(relative):
        stem, _ = os.path.splitext(relative)
        return os.path.join(root, VALIDATORS_DIR, stem + AIKEN_EXTENSION)

    stem, _ = os.path.splitext(os.path.basename(source))
    return os.path.join(os.path.dirname(source), VALIDATORS_DIR, stem + AIKEN_EXTENSION)


def write_text(path: str, content: str) -> str:
    """Write content, creating parent directories; returns the path"""
    ensure_directory_exists(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path
