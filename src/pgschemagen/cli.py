"""Command-line interface for pgschemagen."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pgschemagen.config import find_config_file, load_config
from pgschemagen.exceptions import ConfigError, ValidationError
from pgschemagen.runner import generate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgschemagen",
        description="Generate entity classes, protobuf messages and docs from a PostgreSQL schema",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Config file path (default: search the current directory)",
    )
    parser.add_argument("--src", help="Connection string (overrides config)")
    parser.add_argument(
        "--namespace", help="Schema namespace to inspect (default: public)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Deadline in seconds for schema introspection",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    try:
        return cmd_generate(args)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


def cmd_generate(args: argparse.Namespace) -> int:
    """Load config, inspect the schema and run every generator."""
    try:
        config_path = args.config or find_config_file(Path.cwd())
        config = load_config(
            config_path,
            src=args.src,
            namespace=args.namespace,
            statement_timeout=args.timeout,
        )
        generate(config)
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print(f"Validation error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Generation error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
