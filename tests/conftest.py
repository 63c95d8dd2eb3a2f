"""
Shared fixtures: documentation and SDK trees built under tmp_path.
"""

import textwrap

import pytest

from agentcheck.core.config import resolve_config
from agentcheck.rules.loader import build_rules, load_ruleset
from agentcheck.rules.engine import RuleEngine


SDK_CLOUDX = """\
package io.cloudx.sdk

object CloudX {
    fun initialize(params: CloudXInitializationParams) {}
    fun createBanner(placementName: String): CloudXAdView? = null
    fun createInterstitial(placementName: String): CloudXInterstitialAd? = null
    fun setPrivacy(privacy: CloudXPrivacy) {}
    fun deinitialize() {}
}
"""

SDK_TYPES = """\
package io.cloudx.sdk

interface CloudXAdListener {
    fun onAdLoaded(cloudXAd: CloudXAd)
}

class CloudXAdView

class CloudXInterstitialAd
"""


@pytest.fixture
def sdk_dir(tmp_path):
    """An SDK tree with exactly ten public names."""
    root = tmp_path / "sdk"
    root.mkdir()
    (root / "CloudX.kt").write_text(SDK_CLOUDX)
    (root / "Types.kt").write_text(SDK_TYPES)
    return root


@pytest.fixture
def docs_dir(tmp_path):
    root = tmp_path / "agents"
    root.mkdir()
    return root


@pytest.fixture
def write_doc(docs_dir):
    def write(name: str, text: str):
        path = docs_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text))
        return path
    return write


@pytest.fixture
def ruleset_file(tmp_path):
    def write(rules_yaml: str, name: str = "test-rules"):
        path = tmp_path / f"{name}.yaml"
        path.write_text(f"name: {name}\nrules:\n{textwrap.dedent(rules_yaml)}")
        return path
    return write


@pytest.fixture
def prepare_run():
    """(config, engine) for a ruleset file and explicit directories."""
    def prepare(ruleset_path, docs, sdk=None):
        ruleset = load_ruleset(ruleset_path)
        config = resolve_config(
            ruleset,
            docs_dir=str(docs),
            sdk_dir=str(sdk) if sdk else None,
            environ={},
        )
        return config, RuleEngine(build_rules(ruleset))
    return prepare
