"""system-info CLI: decode System Info and Driver Overrides JSON files."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def main():
    """Main CLI entry point for system-info commands."""
    try:
        package_version = get_version("system-info-utils")
    except PackageNotFoundError:
        package_version = "dev"

    parser = argparse.ArgumentParser(
        prog="system-info",
        description="System Info: decode versioned hardware/driver/OS inventory documents"
    )
    parser.add_argument("--version", action="version", version=f"system-info {package_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log decoding failures to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # decode command
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a System Info JSON file",
        parents=[parent_parser]
    )
    decode_parser.add_argument(
        "path",
        type=Path,
        help="Path to System Info JSON"
    )
    decode_parser.add_argument(
        "--extract",
        action="store_true",
        help="Print the system subtree with its envelope stripped instead of the decoded record"
    )

    # overrides command
    overrides_parser = subparsers.add_parser(
        "overrides",
        help="Filter a Driver Overrides JSON file down to user-modified settings",
        parents=[parent_parser]
    )
    overrides_parser.add_argument(
        "path",
        type=Path,
        help="Path to Driver Overrides JSON"
    )
    overrides_parser.add_argument(
        "--chunk-version",
        type=int,
        default=None,
        help="Driver Overrides chunk version of the data (defaults to the current version)"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        text = args.path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: Cannot read {args.path}: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy imports: only load the reader the command needs
    if args.command == "decode":
        from ._internal.canonical_json import canonical_dumps

        if args.extract:
            from .api import extract_system_json

            extracted = extract_system_json(text)
            if not extracted:
                print(f"Error: {args.path} is not valid JSON", file=sys.stderr)
                sys.exit(1)
            if not args.quiet:
                print(extracted)
            return

        from .api import read_system_info

        result = read_system_info(text)
        if not result.ok:
            print(f"Error: [{result.code.value}] {result.message}", file=sys.stderr)
            sys.exit(1)
        if not args.quiet:
            print(canonical_dumps(result.record.model_dump(mode="json")))

    elif args.command == "overrides":
        from .driver_overrides import DRIVER_OVERRIDES_CHUNK_VERSION, parse_driver_overrides

        chunk_version = args.chunk_version
        if chunk_version is None:
            chunk_version = DRIVER_OVERRIDES_CHUNK_VERSION

        result = parse_driver_overrides(text, chunk_version)
        if not result.ok:
            print(f"Error: [{result.code.value}] {result.message}", file=sys.stderr)
            sys.exit(1)
        if not args.quiet:
            print(result.text)


if __name__ == "__main__":
    main()
