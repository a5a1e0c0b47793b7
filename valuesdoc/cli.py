"""CLI entrypoints for valuesdoc commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .checker import check_keys
from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .merge import combine_metadata_and_values
from .parser import ValuesParseError, create_values_object, parse_metadata_comments


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_values_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "values",
        help="Path to the annotated values file (e.g. values.yaml).",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a YAML or JSON config overriding comment and tag keywords.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valuesdoc",
        description="Extract parameter documentation from annotated chart values files.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print documented parameters merged with their actual values as JSON.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_values_arguments(inspect_parser)

    check_parser = subparsers.add_parser(
        "check",
        help="Report undocumented keys and documented keys missing from the values.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_values_arguments(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for valuesdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    values_path = Path(args.values)
    try:
        config = load_config(Path(args.config) if args.config else None)
        metadata = parse_metadata_comments(values_path, config)
        values = create_values_object(values_path)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, ValuesParseError) as exc:
        parser.exit(1, f"valuesdoc {args.command} failed: {exc}\n")
    logger.debug("Read %d documented and %d actual keys", len(metadata.parameters), len(values))

    if args.command == "inspect":
        combine_metadata_and_values(metadata, values, config)
        print(json.dumps(metadata.to_dict(), indent=2, default=str))
    elif args.command == "check":
        result = check_keys(values, metadata)
        if not result.ok:
            for message in result.messages():
                print(message)
            parser.exit(1)
        print("All keys documented")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
