"""
Command-line interface tests.
"""

import json

import pytest

from agentcheck.cli.main import main


RULES = """\
- id: old_init_params_name
  type: deprecated_pattern
  description: No old name CloudXInitParams
  match: keyword
  patterns: [CloudXInitParams]
- id: initialize_exists
  type: existence
  description: CloudX.initialize() exists
  symbol: CloudX.initialize
"""


@pytest.fixture(autouse=True)
def no_sdk_env(monkeypatch):
    monkeypatch.delenv("SDK_DIR", raising=False)


@pytest.fixture
def rules_path(ruleset_file):
    return str(ruleset_file(RULES))


def run(*argv):
    return main([*argv, "--log-level", "silent"])


class TestValidate:

    def test_validate_is_default_command(self, write_doc, docs_dir, rules_path, capsys):
        write_doc("integrator.md", "CloudX.initialize(params)\n")
        code = run("--docs", str(docs_dir), "--ruleset", rules_path)
        out = capsys.readouterr().out
        assert code == 0
        assert "✅ PASS: No old name CloudXInitParams" in out
        assert "⚠️  WARN: CloudX.initialize() exists" in out

    def test_fail_exit_code(self, write_doc, docs_dir, rules_path, capsys):
        write_doc("integrator.md", "CloudXInitParams\n")
        assert run("validate", "--docs", str(docs_dir), "--ruleset", rules_path) == 1
        assert "Remediation:" in capsys.readouterr().out

    def test_sdk_dir_from_environment(self, monkeypatch, sdk_dir, write_doc, docs_dir, rules_path, capsys):
        monkeypatch.setenv("SDK_DIR", str(sdk_dir))
        write_doc("integrator.md", "CloudX.initialize(params)\n")
        assert run("--docs", str(docs_dir), "--ruleset", rules_path) == 0
        out = capsys.readouterr().out
        assert "✅ PASS: CloudX.initialize() exists" in out
        assert "DEGRADED" not in out

    def test_json_format(self, sdk_dir, write_doc, docs_dir, rules_path, capsys):
        write_doc("integrator.md", "CloudX.initialize(params)\n")
        code = run("--docs", str(docs_dir), "--ruleset", rules_path, "--sdk-dir", str(sdk_dir), "--format", "json")
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["ruleset"] == "test-rules"
        assert data["exit_code"] == 0
        assert [v["rule_id"] for v in data["verdicts"]] == ["old_init_params_name", "initialize_exists"]
        assert data["coverage"]["applicable"] is True

    def test_input_error_exit_code(self, write_doc, docs_dir, rules_path, capsys):
        write_doc("broken.md", "VALIDATION:IGNORE:END\n")
        assert run("--docs", str(docs_dir), "--ruleset", rules_path) == 2
        out = capsys.readouterr().out
        assert "INPUT ERROR (unmatched_end)" in out
        assert "broken.md:1" in out

    def test_missing_docs_directory(self, tmp_path, rules_path):
        assert run("--docs", str(tmp_path / "nope"), "--ruleset", rules_path) == 2

    def test_unknown_ruleset(self, docs_dir, capsys):
        assert run("--docs", str(docs_dir), "--ruleset", "no-such-ruleset") == 3
        assert "CONFIG ERROR" in capsys.readouterr().out

    def test_unknown_source_language(self, tmp_path, sdk_dir, write_doc, docs_dir, capsys):
        path = tmp_path / "swift.yaml"
        path.write_text("name: swift\nsettings:\n  source: {languages: [kotlin, swift]}\n")
        write_doc("integrator.md", "CloudX\n")
        assert run("--docs", str(docs_dir), "--ruleset", str(path), "--sdk-dir", str(sdk_dir)) == 3
        out = capsys.readouterr().out
        assert "CONFIG ERROR" in out
        assert "swift" in out

    def test_missing_version_manifest(self, tmp_path, monkeypatch, write_doc, docs_dir, capsys):
        path = tmp_path / "manifest.yaml"
        path.write_text(
            "name: manifest\nrules:\n"
            "- {id: manifest, type: file, description: Version manifest, path: SDK_VERSION.yaml}\n"
        )
        write_doc("integrator.md", "CloudX\n")
        monkeypatch.chdir(tmp_path)
        assert run("--docs", str(docs_dir), "--ruleset", str(path)) == 1
        assert "❌ FAIL: Version manifest" in capsys.readouterr().out

        (tmp_path / "SDK_VERSION.yaml").write_text("sdk_version: 1.0\n")
        assert run("--docs", str(docs_dir), "--ruleset", str(path)) == 0


class TestCoverageCommand:

    def test_reports_percentage(self, sdk_dir, write_doc, docs_dir, rules_path, capsys):
        write_doc("integrator.md", "CloudX CloudXAdView CloudXAdListener onAdLoaded initialize\n")
        code = run("coverage", "--docs", str(docs_dir), "--ruleset", rules_path, "--sdk-dir", str(sdk_dir))
        out = capsys.readouterr().out
        assert code == 0
        assert "Coverage:              50%" in out
        assert "⚠️  setPrivacy - NOT documented in agents" in out

    def test_without_source(self, write_doc, docs_dir, rules_path, capsys):
        write_doc("integrator.md", "CloudX\n")
        assert run("coverage", "--docs", str(docs_dir), "--ruleset", rules_path) == 0
        assert "N/A" in capsys.readouterr().out

    def test_input_error(self, write_doc, docs_dir, rules_path):
        write_doc("broken.md", "VALIDATION:IGNORE:START\n")
        assert run("coverage", "--docs", str(docs_dir), "--ruleset", rules_path) == 2


class TestRulesCommand:

    def test_lists_packaged_rules(self, capsys):
        assert run("rules") == 0
        out = capsys.readouterr().out
        assert out.startswith("cloudx-android 1.0:")
        assert "Deprecated Patterns:" in out
        assert "[warn] auto_load_mentioned" in out

    def test_unknown_ruleset(self):
        assert run("rules", "--ruleset", "no-such-ruleset") == 3
