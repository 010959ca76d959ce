"""
CLI entrypoint for the topic resolution engine.

Subcommands:
- resolve: resolve a component reference to one document (or subsection)
- check: run the consistency checker over the corpus, optionally writing a CSV report
- build-index: build the graph and write the serialized index for fast cold start

Each run:
- loads .env (if present) and configs/engine.yaml (+ aliases.yaml)
- configures console (and optional file) logging with a run tag
- prints machine-readable JSON on stdout; logs go to stderr
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from application import (
    TaxonomyService,
    dump_result,
    dump_violations,
    log_check_summary,
    save_violation_report,
)
from application.constants import (
    EXIT_BUILD_ERROR,
    EXIT_FINDINGS,
    EXIT_OK,
    LOG_FILENAME,
    OUTPUT_ROOT,
    VIOLATIONS_REPORT_FILENAME,
)
from domain.taxonomy import TaxonomyError
from infrastructure.config import EngineConfig, load_engine_config
from infrastructure.constants import ENGINE_CONFIG_FILE
from infrastructure.io import ensure_exists
from infrastructure.observability import configure_logging, get_log_context, set_log_context

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="topic-engine", description="Resolve component references to corpus documents")
    p.add_argument(
        "--config",
        type=str,
        default=str(ENGINE_CONFIG_FILE),
        help="Path to engine.yaml (default: configs/engine.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded when present (default: .env)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="WARNING",
        choices=LOG_LEVELS,
        help="Console log level",
    )
    p.add_argument(
        "--log-file",
        type=str,
        nargs="?",
        default=None,
        const=str(OUTPUT_ROOT / LOG_FILENAME),
        help=f"Rotating log file at DEBUG level (bare flag: {OUTPUT_ROOT / LOG_FILENAME})",
    )

    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("resolve", help="Resolve a component name, identifier or alias")
    r.add_argument("component", type=str, help="Component reference, e.g. 'icon button' or 'WaInput'")
    r.add_argument("--topic", type=str, default=None, help="Topic/framework hint, e.g. 'Angular'")
    r.add_argument("--variant", type=str, default=None, help="Variant/subsection, e.g. 'number input'")
    r.add_argument(
        "--index",
        type=str,
        default=None,
        help="Serve from a serialized graph index instead of reading the corpus",
    )

    c = sub.add_parser("check", help="Run the consistency checker")
    c.add_argument(
        "--report",
        type=str,
        nargs="?",
        default=None,
        const=str(OUTPUT_ROOT / VIOLATIONS_REPORT_FILENAME),
        help=f"Write violations to this CSV file (bare flag: {OUTPUT_ROOT / VIOLATIONS_REPORT_FILENAME})",
    )

    b = sub.add_parser("build-index", help="Build the graph and write the serialized index")
    b.add_argument("--out", type=str, default=None, help="Index path (default: index_file from engine.yaml)")

    return p.parse_args(argv)


def _run_resolve(args: argparse.Namespace, cfg: EngineConfig) -> int:
    if args.index:
        service = TaxonomyService.from_index(Path(args.index), settings=cfg.matching)
    else:
        service = TaxonomyService.from_config(cfg)

    result = service.resolve(args.component, topic_hint=args.topic, variant=args.variant)
    print(dump_result(result))
    return EXIT_OK if result.status == "found" else EXIT_FINDINGS


def _run_check(args: argparse.Namespace, cfg: EngineConfig) -> int:
    service = TaxonomyService.from_config(cfg)
    violations = service.check()

    report_path = Path(args.report) if args.report else None
    if report_path is not None:
        save_violation_report(violations, report_path)

    log_check_summary(violations, report_path)
    print(dump_violations(violations))
    return EXIT_FINDINGS if violations else EXIT_OK


def _run_build_index(args: argparse.Namespace, cfg: EngineConfig) -> int:
    service = TaxonomyService.from_config(cfg)
    service.reload()
    out = Path(args.out) if args.out else cfg.index_file
    service.save_index(out)
    print(str(out))
    return EXIT_OK


COMMANDS = {
    "resolve": _run_resolve,
    "check": _run_check,
    "build-index": _run_build_index,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    configure_logging(
        log_file=Path(args.log_file) if args.log_file else None,
        console_level=getattr(logging, args.console_level),
    )

    run_id = f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{args.command}"
    set_log_context(run_id_full=run_id, command=args.command)
    logger.info("Starting run: %s", get_log_context())

    config_path = Path(args.config)
    ensure_exists(config_path, "engine.yaml")
    cfg = load_engine_config(config_path)

    try:
        return COMMANDS[args.command](args, cfg)
    except TaxonomyError as err:
        logger.error("Cannot build taxonomy graph: %s", err)
        return EXIT_BUILD_ERROR


if __name__ == "__main__":
    sys.exit(main())
