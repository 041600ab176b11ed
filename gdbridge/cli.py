"""CLI entrypoints for gdbridge commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import GDBridgeError
from .logging import configure_logging
from .models import Severity
from .orchestrator import BridgeGenerator


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


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdbridge",
        description="Generate typed C# bridges for GDScript classes in a Godot project.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate bridge and proxy sources for a project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the Godot project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for generated *.g.cs files (defaults to <project>/Generated).",
    )
    generate_parser.add_argument(
        "--native-api",
        type=Path,
        default=None,
        help="YAML or JSON description of the native engine API used for proxies.",
    )
    generate_parser.add_argument(
        "--max-workers",
        type=_positive_int,
        default=1,
        help="Emit units in parallel with this many worker threads.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing files.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gdbridge commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "generate":
        generator = BridgeGenerator(max_workers=args.max_workers)
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = generator.run(
                args.path,
                args.output_dir,
                native_api=args.native_api,
                dry_run=dry_run,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except GDBridgeError as exc:
            parser.exit(1, f"gdbridge generate failed: {exc}\nRun with --verbose for more details.\n")

        output_dir = _relativize(outcome.output_dir)
        suffix = " (dry-run)" if dry_run else ""
        if not outcome.written and not outcome.removed:
            print(f"Generated sources already up to date in {output_dir}{suffix}")
        else:
            print(
                f"{len(outcome.written)} written, {len(outcome.unchanged)} unchanged, "
                f"{len(outcome.removed)} removed in {output_dir}{suffix}"
            )
        errors = [d for d in outcome.result.diagnostics if d.severity is Severity.ERROR]
        if errors:
            parser.exit(2, f"{len(errors)} class(es) could not be generated; see log output.\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
