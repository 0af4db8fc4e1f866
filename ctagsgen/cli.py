"""CLI entrypoints for ctagsgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, GenerationSettings, load_config
from .errors import CtagsGenError, SubprocessError
from .logging import configure_logging
from .orchestrator import GenerationOrchestrator
from .resolvers import ReportFileResolver


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
        prog="ctagsgen",
        description="Generate a ctags file covering a project and its dependency sources.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        aliases=["gen-ctags"],
        help="Unzip dependency source jars and generate the tag file.",
        description=(
            "Unzip dependency source jars and generate the tag file. WARNING: the "
            "dependency source directory is deleted on every run."
        ),
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Configuration file (defaults to <path>/{CONFIG_FILENAME}).",
    )
    generate_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Dependency report listing resolved artifacts (JSON or YAML).",
    )
    paths = generate_parser.add_mutually_exclusive_group()
    paths.add_argument(
        "--relative",
        dest="relative",
        action="store_const",
        const=True,
        default=None,
        help="Write tag paths relative to the project root.",
    )
    paths.add_argument(
        "--absolute",
        dest="relative",
        action="store_const",
        const=False,
        help="Write absolute tag paths (the default).",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the ctags command without resolving, unzipping or running anything.",
    )
    generate_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )

    return parser


def _load_settings(args: argparse.Namespace) -> GenerationSettings:
    root = Path(args.path).expanduser().resolve()
    settings = load_config(args.config if args.config is not None else root, root=root)
    if args.relative is not None:
        settings = settings.with_params(use_relative_paths=args.relative)
    return settings


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ctagsgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    try:
        settings = _load_settings(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    resolver = None
    if args.report is not None:
        resolver = ReportFileResolver(args.report.expanduser().absolute())
    orchestrator = GenerationOrchestrator(resolver=resolver)

    if args.dry_run:
        print(orchestrator.preview(settings).render())
        return

    try:
        outcome = orchestrator.run(settings)
    except SubprocessError as exc:
        parser.exit(_exit_status(exc.returncode), f"ctagsgen {exc.stage} failed: {exc}\n")
    except CtagsGenError as exc:
        parser.exit(
            1, f"ctagsgen {exc.stage} failed: {exc}\nRun with --verbose for more details.\n"
        )

    summary = outcome.extraction
    if summary.failed:
        print(
            f"{summary.failed} of {summary.attempted} dependency source jars could not be unpacked"
        )
    print(f"Tag file written to {_relativize(outcome.tag_file)}")


def _exit_status(returncode: int | None) -> int:
    """Map an indexer return code to our exit status; signals become 128 + signum."""
    if not returncode:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
