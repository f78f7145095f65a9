#!/usr/bin/env python3
"""
AikScript command line: scaffold projects and compile Python contracts to Aiken.

Usage:
    aikscript init my_project
    aikscript compile python/lib/hello_world.py -o validators/hello_world.ak
    aikscript check python/lib/hello_world.py
    aikscript serve --port 8000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.errors import ManifestUpdateError, TranspileError
from .core.transpiler import Transpiler
from .output.manifest import update_plutus_json
from .utils.files import resolve_output_path, write_text
from .utils.project import init_project


def cmd_init(args: argparse.Namespace) -> int:
    try:
        init_project(args.name, parent=args.directory)
    except FileExistsError:
        print(f"❌ Directory {args.name} already exists!")
        return 1

    print(f"✅ Project {args.name} created successfully!")
    print("\n🚀 Next steps:")
    print(f"   cd {args.name}")
    print("   aikscript compile python/lib/hello_world.py")
    print("   aiken check")
    return 0


def cmd_compile(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        print(f"❌ Input file not found: {input_path}")
        return 1

    output_path = resolve_output_path(str(input_path), args.output)
    print(f"🔄 Compiling {input_path} to {output_path}...")

    try:
        aiken_source = Transpiler().transpile_file(str(input_path))
    except TranspileError as e:
        print(f"❌ Compilation failed: {e}")
        return 1

    write_text(output_path, aiken_source)

    print("✅ Compilation successful!")
    print(f"📄 Aiken output: {output_path}")

    plutus_json = Path.cwd() / "plutus.json"
    if plutus_json.exists():
        try:
            update_plutus_json(str(plutus_json), input_path.stem, output_path)
            print("📄 Updated plutus.json with validator information")
        except ManifestUpdateError as e:
            print(f"⚠️  {e}")

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    transpiler = Transpiler()
    try:
        module = transpiler.transform(transpiler.parse(
            Path(args.input).read_text(encoding="utf-8"),
            filename=args.input
        ))
    except OSError as e:
        print(f"❌ Could not read {args.input}: {e}")
        return 1
    except TranspileError as e:
        print(f"❌ {args.input}: {e}")
        return 1

    print("=" * 60)
    print(f"MODULE: {module.module_name}")
    print("=" * 60)
    print(f"Imports:    {len(module.imports)}")
    print(f"Types:      {len(module.types)}")
    print(f"Constants:  {len(module.constants)}")
    print(f"Functions:  {len(module.functions) - len(module.validators)}")
    print(f"Validators: {len(module.validators)}")
    for handler in module.validators:
        params = ", ".join(p.name for p in handler.parameters)
        print(f"   {handler.contract}.{handler.purpose_name}({params})")
    print(f"Tests:      {len(module.tests)}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .server.app import run

    run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aikscript",
        description="Write Cardano smart contracts in Python, compile them to Aiken",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Create a project
    aikscript init my_project

    # Compile a contract (written to validators/ by default)
    aikscript compile python/lib/hello_world.py

    # Parse only and list what was found
    aikscript check python/lib/hello_world.py -v
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init", help="Create a new Aiken project")
    init.add_argument("name", help="Project name")
    init.add_argument("--directory", default=".", help="Parent directory")
    init.set_defaults(handler=cmd_init)

    compile_ = subparsers.add_parser("compile", help="Compile a Python contract to Aiken")
    compile_.add_argument("input", help="Python source file")
    compile_.add_argument("-o", "--output", help="Output .ak file")
    compile_.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    compile_.set_defaults(handler=cmd_compile)

    check = subparsers.add_parser("check", help="Parse a Python contract without writing output")
    check.add_argument("input", help="Python source file")
    check.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    check.set_defaults(handler=cmd_check)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
