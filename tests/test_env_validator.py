"""Tests for the schema-driven environment reader."""

import pytest

from yoapi_plugin_pgsqldb.exceptions import ConfigurationError
from yoapi_plugin_pgsqldb.utils.env_validator import EnvValidator, EnvVarType


SCHEMA = {
    "APP_NAME": {"type": EnvVarType.STRING, "required": True},
    "APP_PORT": {"type": EnvVarType.INTEGER, "default": 5432, "min": 1, "max": 65535},
    "APP_RATIO": {"type": EnvVarType.FLOAT, "required": False},
    "APP_DEBUG": {"type": EnvVarType.BOOLEAN, "default": False},
    "APP_MODE": {"type": EnvVarType.STRING, "enum": ["a", "b"], "required": False},
}


def test_reads_and_converts():
    values = EnvValidator(environ={
        "APP_NAME": "svc",
        "APP_PORT": "6543",
        "APP_RATIO": "0.5",
        "APP_DEBUG": "yes",
    }).validate_env_vars("test", SCHEMA)
    assert values == {"APP_NAME": "svc", "APP_PORT": 6543, "APP_RATIO": 0.5, "APP_DEBUG": True}


def test_defaults_and_missing_optionals():
    values = EnvValidator(environ={"APP_NAME": "svc"}).validate_env_vars("test", SCHEMA)
    assert values["APP_PORT"] == 5432
    assert values["APP_DEBUG"] is False
    assert "APP_RATIO" not in values


def test_empty_string_counts_as_unset():
    values = EnvValidator(environ={"APP_NAME": "svc", "APP_PORT": ""}).validate_env_vars("test", SCHEMA)
    assert values["APP_PORT"] == 5432


def test_required_missing():
    with pytest.raises(ConfigurationError, match="APP_NAME"):
        EnvValidator(environ={}).validate_env_vars("test", SCHEMA)


@pytest.mark.parametrize("name, value", [
    ("APP_PORT", "abc"),
    ("APP_PORT", "0"),
    ("APP_PORT", "70000"),
    ("APP_DEBUG", "maybe"),
    ("APP_MODE", "c"),
])
def test_invalid_values(name, value):
    environ = {"APP_NAME": "svc", name: value}
    with pytest.raises(ConfigurationError, match=name):
        EnvValidator(environ=environ).validate_env_vars("test", SCHEMA)


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("APP_NAME", "from-env")
    values = EnvValidator().validate_env_vars("test", {"APP_NAME": {"required": True}})
    assert values["APP_NAME"] == "from-env"
