"""
Runner — One validation run, end to end.

load corpus -> extract symbols -> evaluate rules -> coverage -> aggregate

The runner is NOT where rule logic lives. It wires the stages together
and turns an InputError or ConfigError into a report with no verdicts.
"""

from agentcheck.core.config import RunConfig
from agentcheck.core.errors import ConfigError, InputError
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.corpus.loader import load_filtered
from agentcheck.corpus.models import DocumentCorpus
from agentcheck.coverage.analyzer import CoverageReport, compute_coverage
from agentcheck.report.aggregator import ValidationReport, aggregate
from agentcheck.rules.engine import RuleEngine
from agentcheck.symbols.extractor import extract_public_symbols
from agentcheck.symbols.models import SymbolSource

log = get_logger(LogChannel.SYSTEM)


def load_inputs(config: RunConfig) -> tuple[DocumentCorpus, SymbolSource]:
    """
    Load the corpus and the symbol source for a run.

    Raises:
        InputError: The corpus is missing or malformed
    """
    corpus = load_filtered(config.docs_dir, config.file_pattern, config.markers)
    symbols = extract_public_symbols(
        config.sdk_dir,
        languages=config.languages,
        required_files=config.required_files,
        on_partial=config.on_partial,
    )
    return corpus, symbols


def measure_coverage(config: RunConfig, corpus: DocumentCorpus, symbols: SymbolSource) -> CoverageReport:
    return compute_coverage(
        corpus,
        symbols,
        exclude=config.coverage_exclude,
        kinds=config.coverage_kinds,
    )


def run_validation(config: RunConfig, engine: RuleEngine) -> ValidationReport:
    """
    Run every rule against the configured inputs.

    Args:
        config: Resolved run configuration
        engine: Engine holding the rules to run

    Returns:
        ValidationReport. An InputError or ConfigError yields a report
        with no verdicts and the reserved exit code; neither is raised.
    """
    try:
        corpus, symbols = load_inputs(config)
    except InputError as exc:
        log.error("input_error", kind=exc.kind.value, error=str(exc))
        return ValidationReport.for_input_error(exc)
    except ConfigError as exc:
        log.error("config_error", error=str(exc))
        return ValidationReport.for_config_error(exc)

    outcomes = engine.evaluate(corpus, symbols)
    coverage = measure_coverage(config, corpus, symbols)
    return aggregate(outcomes, coverage, symbols)


def run_coverage(config: RunConfig) -> tuple[CoverageReport, SymbolSource]:
    """
    Coverage only, no rules.

    Raises:
        InputError: The corpus is missing or malformed
        ConfigError: The source settings are unusable
    """
    corpus, symbols = load_inputs(config)
    return measure_coverage(config, corpus, symbols), symbols
