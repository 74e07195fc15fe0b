"""CLI entrypoints for hubdocs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import HubDocsError
from .logging import configure_logging
from .orchestrator import Orchestrator


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hubdocs",
        description="Generate GitBook-style documentation for FHEVM example contracts.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Regenerate the documentation set from the registry or the contracts directory.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "project_root",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "output_dir",
        nargs="?",
        default="./docs",
        help="Directory that receives the generated pages (defaults to ./docs).",
    )
    generate_parser.add_argument(
        "--hub",
        action="store_true",
        help="Force registry (hub) mode even when no registry is auto-detected.",
    )
    generate_parser.add_argument(
        "--functions",
        action="store_true",
        default=None,
        help="Include a Functions section on each contract page.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hubdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "generate":
        try:
            result = Orchestrator().run(
                args.project_root,
                args.output_dir,
                force_hub=bool(args.hub),
                include_functions=args.functions,
            )
        except (HubDocsError, OSError) as exc:
            parser.exit(1, f"hubdocs generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Documentation generated in {_relativize(result.output_dir)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
