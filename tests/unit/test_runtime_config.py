"""
Configuration Tests

Tests for core/config/runtime.py and atstdd_cli/config.py:
defaults, file loading, env overrides and key redaction.
"""

import json

import pytest

from atstdd_cli.config import (
    CLIConfig,
    get_default_config_template,
    load_config,
    load_config_from_file,
)
from core.config import RuntimeConfig, get_default_config, set_default_config


class TestRuntimeConfig:
    """Tests for RuntimeConfig."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.network.rpc_url == "http://localhost:8545"
        assert config.network.attester is None
        assert config.slicer.gas_margin == 100_000
        assert config.publisher.receipt_timeout == 120.0

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"network": {"chain_id": 420}, "slicer": {"gas_margin": 5}})

        assert config.network.chain_id == 420
        assert config.network.rpc_url == "http://localhost:8545"
        assert config.slicer.gas_margin == 5

    def test_from_dict_unknown_key(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"network": {"rpc": "x"}})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "atstdd.yaml"
        path.write_text("network:\n  rpc_url: http://node:8545\n  chain_id: 420\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.network.rpc_url == "http://node:8545"
        assert config.network.chain_id == 420

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ATSTDD_RPC_URL", "http://env:8545")
        monkeypatch.setenv("ATSTDD_GAS_MARGIN", "250000")
        monkeypatch.setenv("ATSTDD_RECEIPT_TIMEOUT", "30")
        base = RuntimeConfig.from_dict({"network": {"chain_id": 420}})

        config = base.with_env_overrides()

        assert config.network.rpc_url == "http://env:8545"
        assert config.network.chain_id == 420
        assert config.slicer.gas_margin == 250_000
        assert config.publisher.receipt_timeout == 30.0
        assert base.network.rpc_url == "http://localhost:8545"

    def test_no_overrides_returns_same(self):
        config = RuntimeConfig()

        assert config.with_env_overrides() is config

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ATSTDD_CHAIN_ID", "10")

        assert RuntimeConfig.from_env().network.chain_id == 10

    def test_private_key_redacted(self):
        config = RuntimeConfig.from_dict({"network": {"private_key": "0x" + "11" * 32}})

        assert config.to_dict()["network"]["private_key"] == "***"
        assert config.to_dict(redact=False)["network"]["private_key"] == "0x" + "11" * 32

    def test_default_config_singleton(self):
        custom = RuntimeConfig.from_dict({"slicer": {"gas_margin": 1}})
        set_default_config(custom)
        try:
            assert get_default_config() is custom
        finally:
            set_default_config(None)


class TestCLIConfig:
    """Tests for CLI config loading."""

    def test_defaults_without_file(self):
        config = load_config()

        assert config.log_level == "INFO"
        assert config.runtime.network.rpc_url == "http://localhost:8545"

    def test_template_is_loadable(self, tmp_path):
        path = tmp_path / "atstdd.json"
        path.write_text(get_default_config_template())

        config = load_config_from_file(path)

        assert config.runtime.slicer.gas_margin == 100_000
        assert config.default_output_format == "human"

    def test_discovers_cwd_file(self, tmp_path):
        (tmp_path / "atstdd.json").write_text(json.dumps({
            "log_level": "DEBUG",
            "network": {"attester": "0x" + "42" * 20},
        }))

        config = load_config()

        assert config.log_level == "DEBUG"
        assert config.runtime.network.attester == "0x" + "42" * 20

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "network": {"rpc_url": "http://file"}}))
        monkeypatch.setenv("ATSTDD_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("ATSTDD_RPC_URL", "http://env")

        config = load_config(path)

        assert config.log_level == "WARNING"
        assert config.runtime.network.rpc_url == "http://env"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_to_dict_flattens_runtime(self):
        data = CLIConfig().to_dict()

        assert data["log_level"] == "INFO"
        assert data["network"]["rpc_url"] == "http://localhost:8545"
