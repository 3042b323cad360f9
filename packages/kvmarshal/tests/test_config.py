import sys
import types

import pytest
from pydantic import ValidationError

from kvmarshal import Decoder, DecoderConfig, MapKV, Settings
from kvmarshal.conf.settings import _select
from kvmarshal.exceptions import ConfigError


def test_defaults():
    config = Decoder(MapKV()).config
    assert config == DecoderConfig(separator="/", slice_separator=",", tag="kv", prefix="")


def test_options_override_defaults():
    config = Decoder(MapKV(), separator=".", slice_separator=";", tag="consul", prefix="app.").config
    assert config.separator == "."
    assert config.slice_separator == ";"
    assert config.tag == "consul"
    assert config.prefix == "app."


def test_options_override_explicit_config():
    base = DecoderConfig(separator=":", prefix="base:")
    config = Decoder(MapKV(), config=base, prefix="other:").config
    assert config.separator == ":"
    assert config.prefix == "other:"


def test_empty_prefix_is_allowed():
    assert Decoder(MapKV(), prefix="").config.prefix == ""


@pytest.mark.parametrize(
    "option, message",
    [
        ("separator", "empty key separator"),
        ("slice_separator", "empty slice separator"),
        ("tag", "empty tag name"),
    ],
)
def test_empty_option_is_rejected(option, message):
    with pytest.raises(ConfigError, match=message):
        Decoder(MapKV(), **{option: ""})


def test_all_invalid_options_reported_together():
    with pytest.raises(ConfigError) as ei:
        Decoder(MapKV(), separator="", slice_separator="", tag="")

    err = ei.value
    assert len(err.errors) == 3
    assert all(isinstance(e, ConfigError) for e in err.errors)
    text = str(err)
    assert "empty key separator" in text
    assert "empty slice separator" in text
    assert "empty tag name" in text


def test_config_is_immutable():
    config = DecoderConfig()
    with pytest.raises(ValidationError):
        config.separator = "."


def test_select_keeps_only_decoder_settings():
    mapping = {"TAG": 1, "PREFIX": 2, "KVMARSHAL_TAG": 3, "KVMARSHAL_PREFIX": 4, "DEBUG": 5, "lower": 6}
    assert _select(mapping, None) == {"TAG": 1, "PREFIX": 2}
    assert _select(mapping, "KVMARSHAL") == {"TAG": 3, "PREFIX": 4}


def test_settings_reject_unknown_names():
    with pytest.raises(ConfigError, match="SEPERATOR"):
        Settings({"SEPERATOR": "."})

    settings = Settings()
    with pytest.raises(ConfigError, match="unknown decoder setting"):
        settings["TAGS"] = "consul"
    assert "TAGS" not in settings


def test_later_layers_win():
    settings = Settings({"PREFIX": "first/", "TAG": "a"}, {"PREFIX": "second/"})
    assert settings["PREFIX"] == "second/"
    assert settings["TAG"] == "a"


def test_overlays_ignore_unrelated_names():
    settings = Settings()
    settings.update_from_environ(environ={"KVMARSHAL_CONFIG_MODULE": "x", "KVMARSHAL_TAG": "env"})
    assert settings["TAG"] == "env"
    assert set(settings) == {"SEPARATOR", "SLICE_SEPARATOR", "TAG", "PREFIX"}


def test_settings_layers_over_defaults():
    settings = Settings({"PREFIX": "layer/"})
    assert settings["SEPARATOR"] == "/"
    assert settings["PREFIX"] == "layer/"

    settings["PREFIX"] = "override/"
    assert settings["PREFIX"] == "override/"
    del settings["PREFIX"]
    assert settings["PREFIX"] == "layer/"


def test_settings_update_from_object_and_envvar(monkeypatch):
    module = types.ModuleType("kv_conf")
    module.TAG = "consul"
    module.KV_PREFIX = "ns/"
    monkeypatch.setitem(sys.modules, "kv_conf", module)

    settings = Settings()
    settings.update_from_object("kv_conf")
    assert settings["TAG"] == "consul"

    settings.update_from_object("kv_conf", namespace="KV")
    assert settings["PREFIX"] == "ns/"

    env_module = types.ModuleType("kv_env_conf")
    env_module.SEPARATOR = "."
    monkeypatch.setitem(sys.modules, "kv_env_conf", env_module)
    monkeypatch.setenv("KVMARSHAL_CONFIG_MODULE", "kv_env_conf")

    settings.update_from_envvar()
    assert settings["SEPARATOR"] == "."


def test_settings_update_from_environ():
    settings = Settings()
    settings.update_from_environ(environ={"KVMARSHAL_PREFIX": "env/", "OTHER": "x"})
    assert settings["PREFIX"] == "env/"
    assert "OTHER" not in settings


def test_decoder_from_settings(monkeypatch):
    monkeypatch.setenv("KVMARSHAL_SLICE_SEPARATOR", "|")
    settings = Settings()
    settings.update_from_environ()

    decoder = Decoder.from_settings(MapKV(), settings)
    assert decoder.config.slice_separator == "|"
    assert decoder.config.separator == "/"


def test_decoder_from_default_settings():
    assert Decoder.from_settings(MapKV()).config == DecoderConfig()


def test_invalid_settings_raise_config_error():
    with pytest.raises(ConfigError) as ei:
        DecoderConfig.from_settings(Settings({"SEPARATOR": "", "TAG": ""}))
    assert len(ei.value.errors) == 2
