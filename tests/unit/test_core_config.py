"""Unit tests for env-driven KDF default configuration."""

import pytest

from passbox.core.config import CryptoConfig, load_config
from passbox.core.exceptions import InvalidInputError


def test_defaults_without_env():
    config = CryptoConfig.from_env({})
    assert config == CryptoConfig(kdf_iterations=3, kdf_memory_kb=65536, kdf_parallelism=4)


def test_overrides_from_mapping():
    config = CryptoConfig.from_env(
        {
            "PASSBOX_KDF_ITERATIONS": "4",
            "PASSBOX_KDF_MEMORY_KB": "131072",
            "PASSBOX_KDF_PARALLELISM": "2",
        }
    )
    assert config.kdf_iterations == 4
    assert config.kdf_memory_kb == 131072
    assert config.kdf_parallelism == 2


def test_blank_value_falls_back_to_default():
    assert CryptoConfig.from_env({"PASSBOX_KDF_ITERATIONS": "  "}).kdf_iterations == 3


def test_malformed_value_rejected():
    with pytest.raises(InvalidInputError, match="PASSBOX_KDF_MEMORY_KB"):
        CryptoConfig.from_env({"PASSBOX_KDF_MEMORY_KB": "64MB"})


def test_load_config_reads_process_env(monkeypatch):
    monkeypatch.setenv("PASSBOX_KDF_PARALLELISM", "8")
    assert load_config().kdf_parallelism == 8
    monkeypatch.delenv("PASSBOX_KDF_PARALLELISM")
    assert load_config().kdf_parallelism == 4
