"""Unit tests for settings loading and command running."""

import subprocess

import pytest

from pw_rate_switcher import utils
from pw_rate_switcher.constants import DEFAULT_SAMPLERATE_CONF, MODE_FILE
from pw_rate_switcher.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    YAMLParsingError,
)


def write_settings(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_default_settings_gives_defaults(tmp_path, monkeypatch):
    "Without a settings file every default applies"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    settings = utils.load_yaml_config()
    assert settings.mode == MODE_FILE
    assert settings.notify is True
    assert settings.samplerate_conf == DEFAULT_SAMPLERATE_CONF
    assert [str(step) for step in settings.restart_plan.fallback] == [
        "stop pipewire.socket (optional)",
        "start pipewire.service",
        "start pipewire.socket (optional)",
        "restart wireplumber.service",
    ]


def test_default_settings_path_uses_xdg(tmp_path, monkeypatch):
    "The settings file lives under XDG_CONFIG_HOME"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert utils.default_settings_path() == str(
        tmp_path / "pw-rate-switcher" / "config.yaml"
    )


def test_missing_explicit_settings_raises(tmp_path):
    "An explicitly requested settings file must exist"
    with pytest.raises(ConfigFileNotFoundError):
        utils.load_yaml_config(str(tmp_path / "nope.yaml"))


def test_empty_settings_file(tmp_path):
    "An empty settings file means defaults"
    settings = utils.load_yaml_config(write_settings(tmp_path, ""))
    assert settings.mode == MODE_FILE


def test_settings_values(tmp_path):
    "Values from the file override the defaults, paths kept as written"
    path = write_settings(
        tmp_path,
        "mode: metadata\n"
        "notify: false\n"
        "timeout: 2.5\n"
        "samplerate_conf: ~/pw/99-rate.conf\n"
        "markers:\n"
        "  start: RATES BEGIN\n"
        "  end: RATES END\n"
        "restart:\n"
        "  primary:\n"
        "    - action: restart\n"
        "      units: [pipewire.service]\n",
    )
    settings = utils.load_yaml_config(path)
    assert settings.mode == "metadata"
    assert settings.notify is False
    assert settings.timeout == 2.5
    assert settings.samplerate_conf == "~/pw/99-rate.conf"
    assert (settings.start_marker, settings.end_marker) == ("RATES BEGIN", "RATES END")
    assert [str(step) for step in settings.restart_plan.primary] == [
        "restart pipewire.service"
    ]
    assert settings.restart_plan.fallback == []


def test_invalid_yaml(tmp_path):
    "YAML syntax errors are reported as such"
    with pytest.raises(YAMLParsingError):
        utils.load_yaml_config(write_settings(tmp_path, "mode: [file\n"))


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "colour: blue\n",
        "mode: stereo\n",
        "timeout: -1\n",
        "timeout: soon\n",
        "notify: maybe\n",
        "markers: [a, b]\n",
        "restart: [a]\n",
        "restart:\n  primary: []\n",
        "restart:\n  primary:\n    - action: explode\n      units: [pipewire.service]\n",
        "restart:\n  primary:\n    - action: restart\n      units: []\n",
        "restart:\n  primary:\n    - action: restart\n      unit: pipewire.service\n",
        "markers:\n  start: 2024\n",
        "markers:\n  end: ''\n",
        "markers:\n  begin: RATES\n",
        "restart:\n  primary:\n    - action: restart\n"
        "      units: [pipewire.service]\n      required: nope\n",
        "restart:\n  primary:\n    - action: restart\n"
        "      units: [pipewire.service]\n  fallbak: []\n",
    ],
)
def test_invalid_settings(tmp_path, text):
    "Bad shapes and values are configuration errors"
    with pytest.raises(ConfigurationError):
        utils.load_yaml_config(write_settings(tmp_path, text))


def test_read_text_file_missing(tmp_path):
    "An unreadable config file is reported with its path"
    with pytest.raises(ConfigFileNotFoundError, match="absent"):
        utils.read_text_file(str(tmp_path / "absent"))


def test_run_command_missing_executable():
    "A missing program yields return code 127"
    result = utils.run_command(["pw-rate-switcher-definitely-not-installed"])
    assert result.returncode == 127
    assert not result.ok


def test_run_command_timeout(monkeypatch):
    "A timeout yields return code 124"

    def fake_run(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs["timeout"])

    monkeypatch.setattr(utils.subprocess, "run", fake_run)
    result = utils.run_command(["pw-metadata"], timeout=0.1)
    assert result.returncode == 124


def test_run_command_captures_output(monkeypatch):
    "stdout and the exit code are passed through"

    def fake_run(args, **kwargs):
        return subprocess.CompletedProcess(args, 3, stdout="out\n", stderr="err\n")

    monkeypatch.setattr(utils.subprocess, "run", fake_run)
    result = utils.run_command(["systemctl", "--user", "restart", "x"])
    assert (result.returncode, result.stdout, result.stderr) == (3, "out\n", "err\n")


def test_numeric_marker_message(tmp_path):
    "A non-string marker is rejected with a readable error"
    path = write_settings(tmp_path, "markers:\n  start: 2024\n")
    with pytest.raises(ConfigurationError, match="markers must be non-empty strings"):
        utils.load_yaml_config(path)


def test_unknown_nested_key_is_named(tmp_path):
    "A misspelled restart section key is reported by name"
    path = write_settings(
        tmp_path,
        "restart:\n  primary:\n    - action: restart\n"
        "      units: [pipewire.service]\n  fallbak: []\n",
    )
    with pytest.raises(ConfigurationError, match="fallbak"):
        utils.load_yaml_config(path)


def test_required_flag_must_be_boolean(tmp_path):
    "An optional step must say required: false, not a string"
    path = write_settings(
        tmp_path,
        "restart:\n  primary:\n    - action: restart\n"
        "      units: [pipewire.service]\n      required: nope\n",
    )
    with pytest.raises(ConfigurationError, match="required"):
        utils.load_yaml_config(path)
