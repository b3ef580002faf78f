"""Command line interface for replaying evidence and composing scores."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from traitscore.config.loader import configure_from_cli
from traitscore.config.resolvers import resolve_log_dir
from traitscore.config.scoring import load_scoring_configuration, scoring_configuration_from_mapping
from traitscore.config.settings import Settings, set_settings
from traitscore.domain.exceptions import ConfigurationError, TraitScoreError, ValidationError
from traitscore.domain.models import TRAITS, coverage_from_dict
from traitscore.runners.pipeline import CodingScores, PipelineConfig, run_pipeline
from traitscore.scoring.composer import calculate_score
from traitscore.scoring.models import RawScores, ScoringConfiguration, WorkstyleMetrics
from traitscore.utils.logging import setup_logging

TRAIT_CHOICES = [t.value for t in TRAITS] + ["all"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the traitscore CLI."""
    parser = argparse.ArgumentParser(
        prog="traitscore",
        description=(
            "Aggregate interview evidence into per-trait competency scores "
            "and compose a final candidate score."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Replay evidence files through the aggregator")

    mx = run_p.add_mutually_exclusive_group(required=True)
    mx.add_argument(
        "-i",
        "--input",
        nargs="+",
        help="Evidence files (.json or .jsonl), one per source/modality",
    )
    mx.add_argument(
        "-d",
        "--input-dir",
        type=str,
        help="Directory containing evidence files (*.json/*.jsonl).",
    )
    run_p.add_argument(
        "-R",
        "--recursive",
        action="store_true",
        help="With --input-dir, search subdirectories recursively.",
    )
    run_p.add_argument(
        "-s",
        "--session",
        type=str,
        metavar="PATH",
        help="Session JSON with coverage, coding_scores and workstyle sections.",
    )
    run_p.add_argument(
        "--covered",
        nargs="+",
        choices=TRAIT_CHOICES,
        help="Traits the conversation has covered (overrides the session file).",
    )
    run_p.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Drop malformed evidence records instead of failing.",
    )
    run_p.add_argument(
        "-o",
        "--output",
        type=str,
        metavar="PATH",
        help="Write the JSON report to PATH (default: print to stdout).",
    )
    _add_scoring_config_arg(run_p)

    agg_group = run_p.add_argument_group("Aggregation Options")
    agg_group.add_argument("--w-max", dest="w_max", type=float, help="Cap on a single observation's weight.")
    agg_group.add_argument("--c", dest="c", type=float, help="Confidence shape parameter (W/(W+c)).")
    agg_group.add_argument("--tau", type=float, help="Confidence threshold of the stop gate.")
    agg_group.add_argument("--initial-score", dest="initial_score", type=float, help="Neutral score before evidence.")
    agg_group.add_argument("--min-samples", dest="min_samples", type=int, help="Sample floor of the stop gate.")

    performance_group = run_p.add_argument_group("Performance Options")
    performance_group.add_argument(
        "--chunk-size",
        type=int,
        metavar="N",
        help="Observations per independently aggregated chunk (default: 500).",
    )
    performance_group.add_argument(
        "--max-workers",
        type=int,
        metavar="N",
        help="Worker threads aggregating chunks in parallel.",
    )
    _add_common_args(run_p)

    score_p = sub.add_parser("score", help="Compose a final score from raw dimension scores")
    score_p.add_argument(
        "-s",
        "--session",
        type=str,
        required=True,
        metavar="PATH",
        help="Session JSON with raw_scores and workstyle sections.",
    )
    _add_scoring_config_arg(score_p)
    _add_common_args(score_p)

    return parser


def _add_scoring_config_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--scoring-config",
        type=str,
        metavar="PATH",
        help="Per-role scoring configuration JSON (validated before use).",
    )


def _add_common_args(p: argparse.ArgumentParser) -> None:
    debug_group = p.add_argument_group("Debug Options")
    debug_group.add_argument("--config", type=str, metavar="PATH", help="Settings JSON file.")
    debug_group.add_argument("--debug", action="store_true", help="Enable debug mode with verbose logging.")
    debug_group.add_argument("--dry-run", action="store_true", help="Validate configuration and exit.")
    debug_group.add_argument("--log-file", type=str, metavar="PATH", help="Directory of PATH receives the log files.")


def _read_session(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Session file not found: {p}", config_field="session") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Session file is not valid JSON: {e}", config_field="session") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Session file must contain a JSON object", config_field="session")
    return data


def _scoring_config(args, session: Dict[str, Any]) -> ScoringConfiguration:
    if args.scoring_config:
        return load_scoring_configuration(args.scoring_config)
    if "scoring_config" in session:
        return scoring_configuration_from_mapping(session["scoring_config"])
    return ScoringConfiguration()


def _coverage(args, session: Dict[str, Any]):
    if args.covered:
        if "all" in args.covered:
            return coverage_from_dict({t: True for t in TRAITS})
        return coverage_from_dict({t: True for t in args.covered})
    try:
        return coverage_from_dict(session.get("coverage", {}))
    except ValueError as e:
        raise ConfigurationError(str(e), config_field="session.coverage") from e


def _coding_scores(session: Dict[str, Any]) -> Optional[CodingScores]:
    data = session.get("coding_scores")
    if data is None:
        return None
    try:
        return CodingScores(
            code_quality=float(data["code_quality"]),
            problem_solving=float(data["problem_solving"]),
            independence=float(data["independence"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid coding_scores section: {e}",
            config_field="session.coding_scores"
        ) from e


def _workstyle(session: Dict[str, Any]) -> WorkstyleMetrics:
    try:
        return WorkstyleMetrics.from_dict(session.get("workstyle", {}))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid workstyle section: {e}", config_field="session.workstyle") from e


def _cmd_run(args, settings: Settings, logger: logging.Logger) -> int:
    session = _read_session(args.session)
    cfg = PipelineConfig(
        input=args.input,
        input_dir=args.input_dir,
        recursive=args.recursive,
        coverage=_coverage(args, session),
        coding_scores=_coding_scores(session),
        workstyle=_workstyle(session),
        scoring=_scoring_config(args, session),
        aggregator=settings.aggregation.to_config(),
        output_path=args.output,
        skip_invalid=args.skip_invalid,
        chunk_size=settings.processing.chunk_size,
        max_workers=settings.processing.max_workers,
        memory_threshold_mb=settings.processing.memory_threshold_mb,
    )

    if settings.dry_run:
        logger.info("DRY RUN MODE - configuration validated successfully")
        _print_dry_run_summary(settings, cfg)
        return 0

    res = run_pipeline(cfg)
    if res.output_path:
        logger.info("Report written to %s", res.output_path)
    else:
        print(json.dumps(res.report, indent=2, sort_keys=True))
    return 0


def _cmd_score(args, settings: Settings, logger: logging.Logger) -> int:
    session = _read_session(args.session)
    config = _scoring_config(args, session)
    try:
        raw = RawScores.from_dict(session["raw_scores"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid raw_scores section: {e}", config_field="session.raw_scores") from e
    workstyle = _workstyle(session)

    if settings.dry_run:
        logger.info("DRY RUN MODE - scoring configuration validated successfully")
        return 0

    result = calculate_score(raw, workstyle, config)
    print(json.dumps(result.as_dict(), indent=2, sort_keys=True))
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the traitscore CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = configure_from_cli(args)
        set_settings(settings)

        logger, _ = setup_logging(
            log_dir=str(resolve_log_dir(settings.logging.file_path)),
            console=settings.logging.console_output,
            level=settings.logging.level.value,
            console_level=None if settings.debug_mode else "WARNING",
        )

        if settings.debug_mode:
            logger.debug("Configuration details:")
            for section, values in settings.to_dict().items():
                logger.debug("  %s: %s", section, values)

        if args.cmd == "run":
            code = _cmd_run(args, settings, logger)
        else:
            code = _cmd_score(args, settings, logger)
        sys.exit(code)

    except ConfigurationError as e:
        logging.error("Configuration error: %s", e.message)
        if e.suggestions:
            logging.error("Suggestions:")
            for suggestion in e.suggestions:
                logging.error("  - %s", suggestion)
        sys.exit(1)

    except ValidationError as e:
        logging.error("Invalid evidence: %s", e.message)
        for key, value in e.context.items():
            logging.error("  %s: %s", key, value)
        sys.exit(1)

    except TraitScoreError as e:
        logging.error("Run failed: %s", e)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Run interrupted by user")
        sys.exit(130)


def _print_dry_run_summary(settings: Settings, cfg: PipelineConfig) -> None:
    """Print a summary for dry run mode."""
    agg = settings.aggregation
    print("\n" + "=" * 60)
    print("DRY RUN SUMMARY")
    print("=" * 60)
    print(f"Inputs:             {cfg.input or cfg.input_dir}")
    print(f"Covered traits:     {', '.join(t.value for t, v in cfg.coverage.items() if v) or 'none'}")
    print(f"w_max / c / tau:    {agg.w_max} / {agg.c} / {agg.tau}")
    print(f"Min samples:        {agg.min_samples}")
    print(f"Chunk size:         {cfg.chunk_size:,}")
    print(f"Max workers:        {cfg.max_workers}")
    print(f"Coding scores:      {'yes' if cfg.coding_scores else 'no'}")
    print(f"Output:             {cfg.output_path or 'stdout'}")
    print("=" * 60)
    print()


if __name__ == "__main__":
    main()
