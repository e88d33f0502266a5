"""
SuperModel CLI — inspect models and convert JSON payloads.

Commands:
    supermodel describe <module:Class>          — Show field descriptors
    supermodel load <module:Class> <file|->     — Build models from JSON, print them back
    supermodel models                           — List registered model types

Model references use the "package.module:ClassName" form. Importing the
module registers its models; a bare registered name works as well once
the module has been imported.
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from decimal import Decimal
from fractions import Fraction
from typing import Any, Optional

from ..exceptions import SuperModelError, UnknownModelError
from ..log import configure_logging
from ..model import SuperModel, construct, from_list
from ..registry import default_registry


# =============================================================================
# MODEL LOOKUP
# =============================================================================

def resolve_model(reference: str) -> type:
    """
    Resolve "package.module:Class" (or a registered name) to a model type.

    Raises:
        UnknownModelError: If the module or class cannot be found.
    """
    module_name, _, class_name = reference.rpartition(":")
    if module_name:
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise UnknownModelError(reference) from exc
        model_type = getattr(module, class_name, None)
        if not default_registry.is_model(model_type):
            raise UnknownModelError(reference)
        return model_type

    return default_registry.get(class_name)


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def _json_default(nulls: bool):
    def default(value: Any) -> Any:
        if isinstance(value, SuperModel):
            return value.to_dict(nulls=nulls)
        if isinstance(value, (Decimal, Fraction)):
            return float(value)
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return default


def format_models(result: Any, nulls: bool) -> str:
    return json.dumps(result, indent=2, default=_json_default(nulls))


def _read_payload(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_describe(args: argparse.Namespace) -> int:
    """Show the field descriptors of a model."""
    model_type = resolve_model(args.model)

    print(f"{model_type.__module__}.{model_type.__qualname__}")
    descriptors = model_type.descriptors()
    if not descriptors:
        print("  (no fields)")
        return 0

    for descriptor in descriptors:
        line = f"  {descriptor}"
        if descriptor.related_model is not None:
            line += f"  -> {descriptor.related_model.__qualname__}"
        print(line)
    return 0


def cmd_load(args: argparse.Namespace) -> int:
    """Build models from a JSON file and print them back as JSON."""
    model_type = resolve_model(args.model)

    try:
        payload = _read_payload(args.path)
    except OSError as exc:
        print(f"ERROR: Cannot read {args.path}: {exc.strerror}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Invalid JSON in {args.path}: {exc}", file=sys.stderr)
        return 1

    if isinstance(payload, list):
        result: Any = [m.to_dict(nulls=args.nulls) for m in from_list(model_type, payload)]
    elif isinstance(payload, dict):
        result = construct(model_type, payload).to_dict(nulls=args.nulls)
    else:
        print("ERROR: JSON payload must be an object or an array of objects", file=sys.stderr)
        return 1

    print(format_models(result, args.nulls))
    return 0


def cmd_models(args: argparse.Namespace) -> int:
    """List registered model types."""
    names = default_registry.names()
    if not names:
        print("No models registered.")
        return 0
    for name in names:
        print(name)
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="supermodel",
        description="SuperModel — build typed models from untyped JSON",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to SUPERMODEL_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--import",
        dest="imports",
        action="append",
        default=[],
        metavar="MODULE",
        help="Import a module before running, registering its models",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    describe_parser = subparsers.add_parser(
        "describe",
        help="Show the field descriptors of a model",
    )
    describe_parser.add_argument("model", help="Model reference, e.g. app.models:Person")
    describe_parser.set_defaults(func=cmd_describe)

    load_parser = subparsers.add_parser(
        "load",
        help="Build models from a JSON file and print them back",
    )
    load_parser.add_argument("model", help="Model reference, e.g. app.models:Person")
    load_parser.add_argument("path", help="JSON file, or '-' for stdin")
    load_parser.add_argument(
        "--nulls",
        action="store_true",
        help="Include unset fields as null",
    )
    load_parser.set_defaults(func=cmd_load)

    models_parser = subparsers.add_parser(
        "models",
        help="List registered model types",
    )
    models_parser.set_defaults(func=cmd_models)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.log_level)

    try:
        for module_name in args.imports:
            importlib.import_module(module_name)
        return args.func(args)
    except ImportError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except SuperModelError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
