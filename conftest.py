"""Conftest.py for pytest configuration."""

import os
import sys

import pytest

# Add the project root to sys.path so that the pw_rate_switcher package is discoverable.
project_root = os.path.abspath(os.path.dirname(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

SWAY_CONFIG = """\
# Sway config
set $mod Mod4

# Pipewire Sample Rate Options Start
# Sample Rate Options = 44100, 48000, 96000
bindsym $mod+F12 exec pw-rate-switcher
# Pipewire Sample Rate Options End

bindsym $mod+Return exec foot
"""


# Add command line options
def pytest_addoption(parser):
    """Add custom command line options to pytest."""
    parser.addoption(
        "--run-system",
        action="store_true",
        default=False,
        help="Run tests that talk to a real PipeWire user session",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "system: mark test as needing a live PipeWire session"
    )


def pytest_collection_modifyitems(config, items):
    """Skip system tests unless --run-system is given."""
    if config.getoption("--run-system"):
        return
    skip_system = pytest.mark.skip(reason="needs --run-system")
    for item in items:
        if "system" in item.keywords:
            item.add_marker(skip_system)


@pytest.fixture
def sway_config(tmp_path):
    """A Sway config with a 44100/48000/96000 options block."""
    path = tmp_path / "sway" / "config"
    path.parent.mkdir()
    path.write_text(SWAY_CONFIG, encoding="utf-8")
    return path


class FakeRunner:
    """Stands in for run_command, answering from a table of canned results.

    ``results`` maps a command prefix (tuple of leading arguments) to a
    CommandResult. Unmatched commands succeed with empty output.
    """

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def __call__(self, args, timeout=None):
        from pw_rate_switcher.data_types import CommandResult

        self.calls.append(list(args))
        for prefix, result in self.results.items():
            if tuple(args[: len(prefix)]) == prefix:
                return result
        return CommandResult(returncode=0)

    def commands(self, program):
        """Calls made to ``program``, without the program name."""
        return [call[1:] for call in self.calls if call[0] == program]


@pytest.fixture
def fake_runner():
    """A FakeRunner with no canned results."""
    return FakeRunner()
