"""
agentcheck CLI — Validate agent documentation against an SDK.
"""

import argparse
import sys
from typing import Optional

from agentcheck import __version__
from agentcheck.core.config import RunConfig, resolve_config
from agentcheck.core.errors import ConfigError, InputError
from agentcheck.core.logging import LogChannel, configure_logging, get_logger
from agentcheck.core.runner import run_coverage, run_validation
from agentcheck.output.structured import build_coverage_output, build_structured_output
from agentcheck.report.aggregator import EXIT_INPUT_ERROR, EXIT_OK, ValidationReport
from agentcheck.report.render import render_coverage, render_report
from agentcheck.rules.engine import RuleEngine
from agentcheck.rules.loader import DEFAULT_RULESET, build_rules, load_ruleset
from agentcheck.rules.models import RuleCategory
from agentcheck.rules.schema import RulesetSpec

COMMANDS = ("validate", "coverage", "rules")


def _add_ruleset_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ruleset",
        type=str,
        default=DEFAULT_RULESET,
        help=f"Packaged ruleset name or path to a ruleset YAML (default: {DEFAULT_RULESET})",
    )


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    _add_ruleset_option(parser)
    parser.add_argument(
        "--docs",
        type=str,
        default=None,
        help="Agent documentation directory (default: ruleset docs_dir)",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        default=None,
        help="Glob for documentation files, matched recursively (default: ruleset file_pattern)",
    )
    parser.add_argument(
        "--sdk-dir",
        type=str,
        default=None,
        help="SDK source directory (default: SDK_DIR env var, then ruleset sdk_dir)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format (default: text)",
    )


def _add_log_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or AGENTCHECK_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (load,extract,rules,coverage,report,system). Default: all",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentcheck",
        description="Validate agent documentation against an SDK's public API",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"agentcheck {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    validate_parser = subparsers.add_parser("validate", help="Run every rule (default command)")
    _add_run_options(validate_parser)
    _add_log_options(validate_parser)

    coverage_parser = subparsers.add_parser("coverage", help="Report which public SDK names the docs mention")
    _add_run_options(coverage_parser)
    _add_log_options(coverage_parser)

    rules_parser = subparsers.add_parser("rules", help="List the rules of a ruleset")
    _add_ruleset_option(rules_parser)
    _add_log_options(rules_parser)

    return parser


def _with_default_command(argv: list[str]) -> list[str]:
    """Run `validate` when no command is named."""
    if argv and (argv[0] in COMMANDS or argv[0] in ("-h", "--help", "--version")):
        return argv
    return ["validate", *argv]


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(_with_default_command(list(sys.argv[1:] if argv is None else argv)))

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]
    configure_logging(level=args.log_level, channels=channels, force=True)

    if args.command == "rules":
        return run_rules(args)
    if args.command == "coverage":
        return run_coverage_command(args)
    return run_validate(args)


def _load(args: argparse.Namespace) -> tuple[RulesetSpec, RunConfig]:
    ruleset = load_ruleset(args.ruleset)
    config = resolve_config(
        ruleset,
        docs_dir=args.docs,
        file_pattern=args.pattern,
        sdk_dir=args.sdk_dir,
    )
    return ruleset, config


def _emit(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def run_validate(args: argparse.Namespace) -> int:
    """Run the validate command."""
    log = get_logger(LogChannel.SYSTEM)
    ruleset_name = args.ruleset

    try:
        ruleset, config = _load(args)
        ruleset_name = ruleset.name
        engine = RuleEngine(build_rules(ruleset))
    except ConfigError as exc:
        log.error("config_error", error=str(exc))
        report = ValidationReport.for_config_error(exc)
    else:
        log.info(
            "validation_started",
            ruleset=ruleset.name,
            docs=str(config.docs_dir),
            sdk=str(config.sdk_dir) if config.sdk_dir else None,
            rules=len(engine.rules),
        )
        report = run_validation(config, engine)

    if args.format == "json":
        _emit(build_structured_output(report, ruleset=ruleset_name).model_dump_json(indent=2) + "\n")
    else:
        _emit(render_report(report, title=f"Agent Documentation Validation: {ruleset_name}"))

    return report.exit_code


def run_coverage_command(args: argparse.Namespace) -> int:
    """Run the coverage command. Incomplete coverage is not a failure."""
    log = get_logger(LogChannel.SYSTEM)

    try:
        _, config = _load(args)
        coverage, symbols = run_coverage(config)
    except ConfigError as exc:
        log.error("config_error", error=str(exc))
        sys.stderr.write(f"agentcheck: {exc}\n")
        return ValidationReport.for_config_error(exc).exit_code
    except InputError as exc:
        log.error("input_error", kind=exc.kind.value, error=str(exc))
        sys.stderr.write(f"agentcheck: {exc}\n")
        return EXIT_INPUT_ERROR

    if args.format == "json":
        _emit(build_coverage_output(coverage).model_dump_json(indent=2) + "\n")
    else:
        _emit(render_coverage(coverage, getattr(symbols, "source_root", None)))
    return EXIT_OK


def run_rules(args: argparse.Namespace) -> int:
    """List the enabled rules of a ruleset, grouped by category."""
    log = get_logger(LogChannel.SYSTEM)

    try:
        ruleset = load_ruleset(args.ruleset)
        rules = build_rules(ruleset)
    except ConfigError as exc:
        log.error("config_error", error=str(exc))
        sys.stderr.write(f"agentcheck: {exc}\n")
        return ValidationReport.for_config_error(exc).exit_code

    lines = [f"{ruleset.name} {ruleset.version}: {len(rules)} rule(s)"]
    if ruleset.description:
        lines.append(ruleset.description)
    for category in RuleCategory:
        group = [r for r in rules if r.category is category]
        if not group:
            continue
        lines += ["", f"{category.title}:"]
        for rule in group:
            lines.append(f"  [{rule.severity.value}] {rule.id}: {rule.description}")
    _emit("\n".join(lines) + "\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
