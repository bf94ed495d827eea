"""Constants for the PipeWire sample rate switcher."""

APP_NAME = "pw-rate-switcher"
NOTIFY_SUMMARY = "Pipewire Sample Rate Switcher"

DEFAULT_SWAY_CONFIG = "~/.config/sway/config"
DEFAULT_SAMPLERATE_CONF = "~/.config/pipewire/pipewire.conf.d/99-samplerate.conf"
SETTINGS_DIRNAME = "pw-rate-switcher"
SETTINGS_FILENAME = "config.yaml"

START_MARKER = "Pipewire Sample Rate Options Start"
END_MARKER = "Pipewire Sample Rate Options End"
OPTIONS_PREFIX = "# Sample Rate Options ="

MODE_FILE = "file"
MODE_METADATA = "metadata"
SUPPORTED_MODES = (MODE_FILE, MODE_METADATA)

DEFAULT_TIMEOUT = 10.0

NOTIFY_OK_TIMEOUT_MS = 6000
NOTIFY_ERROR_TIMEOUT_MS = 8000

SERVICE_ACTIONS = ("start", "stop", "restart", "try-restart", "reload-or-restart")

DEFAULT_RESTART_PLAN = {
    "primary": [
        {
            "action": "restart",
            "units": [
                "pipewire.service",
                "pipewire-pulse.service",
                "wireplumber.service",
            ],
        },
    ],
    "fallback": [
        {"action": "stop", "units": ["pipewire.socket"], "required": False},
        {"action": "start", "units": ["pipewire.service"]},
        {"action": "start", "units": ["pipewire.socket"], "required": False},
        {"action": "restart", "units": ["wireplumber.service"]},
    ],
}
