"""CLI entrypoints for docmeta commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .config import ConfigError, DocMetaConfig, ModuleFilterConfig, load_config
from .extractor import Extractor
from .logging import configure_logging, get_logger
from .reader import ModuleReader
from .typecheck import load_type_checker


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Show DEBUG messages on the console.",
    )
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        metavar="PATH",
        help="Also write every message, including DEBUG, to this file.",
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="*",
        help="Source directories or archives (defaults to source_paths from the config, then src).",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .docmeta.yml or the directory containing it.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern of module ids to skip; may be repeated.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docmeta",
        description="Extract documentation metadata from Python source roots.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Write module documentation records as JSON.",
    )
    _add_logging_options(extract_parser, suppress_default=True)
    _add_source_options(extract_parser)
    extract_parser.add_argument(
        "-o",
        "--output",
        help="Write JSON to this file instead of stdout.",
    )
    extract_parser.add_argument(
        "--type-checker",
        help="Attach type signatures using the named type checker (e.g. annotations).",
    )
    extract_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation width.",
    )

    modules_parser = subparsers.add_parser(
        "modules",
        help="List the module ids discovered under each source path.",
    )
    _add_logging_options(modules_parser, suppress_default=True)
    _add_source_options(modules_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the extraction HTTP service (requires the service extra).",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docmeta commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    if args.command == "serve":
        _serve(args.host, args.port)
        return

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    paths = _source_paths(args.paths, config)
    module_filter = ModuleFilterConfig(
        include=list(config.modules.include),
        exclude=[*config.modules.exclude, *args.exclude],
    )

    if args.command == "modules":
        extractor = Extractor(module_filter=module_filter)
        for path in paths:
            for module_id in extractor.find_modules(path):
                print(module_id)
        return

    checker_name = args.type_checker or config.type_checker
    try:
        type_checker = load_type_checker(checker_name) if checker_name else None
    except (ValueError, RuntimeError, TypeError) as exc:
        parser.exit(1, f"{exc}\n")

    reader = ModuleReader(
        type_checker=type_checker,
        record_factory_prefix=config.record_factory_prefix,
    )
    extractor = Extractor(reader=reader, module_filter=module_filter)
    records = extractor.extract(paths)
    payload = json.dumps([record.to_dict() for record in records], indent=args.indent)

    output = Path(args.output) if args.output else config.output
    if output is None:
        print(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    logger.info("Wrote %d module records to %s", len(records), output)


def _serve(host: str, port: int) -> None:
    import uvicorn

    from .service import create_app

    uvicorn.run(create_app(), host=host, port=port)


def _source_paths(cli_paths: List[str], config: DocMetaConfig) -> List[Path]:
    if cli_paths:
        return [Path(path) for path in cli_paths]
    return list(config.source_paths)


if __name__ == "__main__":
    main(sys.argv[1:])
