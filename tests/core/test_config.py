"""
Unit tests for run configuration and logging setup.
"""

from pathlib import Path

from agentcheck.core.config import resolve_config
from agentcheck.core.logging import LogChannel, LogLevel, configure_logging, get_current_config
from agentcheck.rules.schema import RulesetSpec


def ruleset(**settings) -> RulesetSpec:
    return RulesetSpec.model_validate({"name": "t", "settings": settings})


class TestResolveConfig:

    def test_ruleset_settings_used(self):
        config = resolve_config(ruleset(docs_dir="docs", sdk_dir="sdk"), environ={})
        assert config.docs_dir == Path("docs")
        assert config.sdk_dir == Path("sdk")
        assert config.file_pattern == "*.md"

    def test_environment_overrides_ruleset(self):
        config = resolve_config(ruleset(sdk_dir="sdk"), environ={"SDK_DIR": "/env/sdk"})
        assert config.sdk_dir == Path("/env/sdk")

    def test_cli_overrides_environment(self):
        config = resolve_config(
            ruleset(sdk_dir="sdk"),
            sdk_dir="/cli/sdk",
            docs_dir="/cli/docs",
            file_pattern="*.txt",
            environ={"SDK_DIR": "/env/sdk"},
        )
        assert config.sdk_dir == Path("/cli/sdk")
        assert config.docs_dir == Path("/cli/docs")
        assert config.file_pattern == "*.txt"

    def test_no_sdk_anywhere(self):
        assert resolve_config(ruleset(), environ={}).sdk_dir is None

    def test_branch_is_not_read(self):
        config = resolve_config(ruleset(), environ={"BRANCH": "release/2.0"})
        assert "release" not in repr(config)

    def test_markers_and_coverage(self):
        config = resolve_config(
            ruleset(markers={"start": "SKIP-START", "end": "SKIP-END"}, coverage={"exclude": ["copy"]}),
            environ={},
        )
        assert config.markers.start == "SKIP-START"
        assert config.coverage_exclude == frozenset({"copy"})


class TestConfigureLogging:

    def test_explicit_settings(self):
        configure_logging(level="verbose", channels=["rules", "load", "bogus"], force=True)
        current = get_current_config()
        assert current["level"] == LogLevel.VERBOSE.name
        assert current["channels"] == sorted([LogChannel.LOAD.value, LogChannel.RULES.value])

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("AGENTCHECK_LOG_LEVEL", "silent")
        monkeypatch.setenv("AGENTCHECK_LOG_CHANNELS", "extract")
        configure_logging(force=True)
        current = get_current_config()
        assert current["level"] == "SILENT"
        assert current["channels"] == ["EXTRACT"]
        monkeypatch.delenv("AGENTCHECK_LOG_LEVEL")
        monkeypatch.delenv("AGENTCHECK_LOG_CHANNELS")
        configure_logging(force=True)
