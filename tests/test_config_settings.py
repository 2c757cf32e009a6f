from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from handcraft_mapper import config as config_module
from handcraft_mapper.config import Settings
from handcraft_mapper.mapper import HandcraftMapper
from handcraft_mapper.mapping.narrowing import ProxyTypeNarrower, RuntimeTypeNarrower


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "LOG_LEVEL",
        "DEFAULT_MAPPING_NAME",
        "ENFORCE_MAPPING_CONTEXT",
        "PROXY_NARROWING",
        "PROVIDER_MODULES",
    ):
        monkeypatch.delenv(name, raising=False)
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def test_defaults():
    s = Settings(_env_file=None)
    assert s.LOG_LEVEL == "WARNING"
    assert s.DEFAULT_MAPPING_NAME == ""
    assert s.ENFORCE_MAPPING_CONTEXT is True
    assert s.PROXY_NARROWING is True
    assert s.PROVIDER_MODULES == []


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ENFORCE_MAPPING_CONTEXT", "false")
    monkeypatch.setenv("PROVIDER_MODULES", " app.mappings , ,app.more ")
    s = Settings(_env_file=None)
    assert s.LOG_LEVEL == "DEBUG"
    assert s.ENFORCE_MAPPING_CONTEXT is False
    assert s.PROVIDER_MODULES == ["app.mappings", "app.more"]


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="LOUD")


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("DEFAULT_MAPPING_NAME", "first")
    assert config_module.get_settings() is config_module.get_settings()
    assert config_module.get_settings().DEFAULT_MAPPING_NAME == "first"


def test_from_settings_applies_configuration():
    s = Settings(
        _env_file=None,
        LOG_LEVEL="INFO",
        DEFAULT_MAPPING_NAME="dto",
        ENFORCE_MAPPING_CONTEXT=False,
        PROXY_NARROWING=False,
    )
    mapper = HandcraftMapper.from_settings(s)
    assert isinstance(mapper.narrower, RuntimeTypeNarrower)
    assert mapper.default_mapping_name == "dto"
    assert mapper.enforce_mapping_context is False
    assert logging.getLogger("handcraft_mapper").level == logging.INFO

    mapper = HandcraftMapper.from_settings(Settings(_env_file=None))
    assert isinstance(mapper.narrower, ProxyTypeNarrower)
