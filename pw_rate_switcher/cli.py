"""Command-line interface for cycling the PipeWire default sample rate."""

import argparse
import logging
import sys
from typing import List, Optional

from pw_rate_switcher import __version__
from pw_rate_switcher.constants import APP_NAME, MODE_METADATA, SUPPORTED_MODES
from pw_rate_switcher.data_types import Settings
from pw_rate_switcher.exceptions import PersistError, RestartError, SwitcherError
from pw_rate_switcher.notify import notify_error, notify_ok
from pw_rate_switcher.pipewire import read_forced_rate, read_graph_rate, set_forced_rate
from pw_rate_switcher.rates import next_rate, parse_rate_options
from pw_rate_switcher.samplerate_conf import read_rate_from_file, write_samplerate_conf
from pw_rate_switcher.services import restart_pipewire_stack
from pw_rate_switcher.utils import expand_path, load_yaml_config, read_text_file

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=(
            "Swap the PipeWire sample rate by rewriting "
            "~/.config/pipewire/pipewire.conf.d/99-samplerate.conf and "
            "restarting PipeWire."
        ),
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to sway config (default: ~/.config/sway/config).",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show parsed options and current rate; do not change anything.",
    )
    parser.add_argument(
        "--mode",
        choices=SUPPORTED_MODES,
        help="'file' rewrites the drop-in config and restarts the services; "
        "'metadata' sets clock.force-rate on the running graph.",
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="YAML settings file "
        "(default: $XDG_CONFIG_HOME/pw-rate-switcher/config.yaml).",
    )
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not send desktop notifications.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Loads the settings file and applies command-line overrides."""
    settings = load_yaml_config(args.settings)
    if args.config:
        settings.sway_config = args.config
    if args.mode:
        settings.mode = args.mode
    if args.no_notify:
        settings.notify = False
    # The only place paths are expanded
    settings.sway_config = expand_path(settings.sway_config)
    settings.samplerate_conf = expand_path(settings.samplerate_conf)
    return settings


def current_rate(settings: Settings) -> Optional[int]:
    """The active rate as persisted by the selected mode, or None if unknown."""
    if settings.mode == MODE_METADATA:
        return read_forced_rate(settings.timeout) or read_graph_rate(settings.timeout)
    return read_rate_from_file(settings.samplerate_conf)


def show(settings: Settings, options: List[int], current: int) -> None:
    """Logs what a switch would start from, without changing anything."""
    logger.info("Sway options: %s.", options)
    if settings.mode == MODE_METADATA:
        forced_rate = read_forced_rate(settings.timeout)
        if forced_rate is None:
            logger.info("No forced rate set.")
        else:
            logger.info("Current forced rate: %d.", forced_rate)
    else:
        logger.info("Current file rate: %d.", current)
    graph_rate = read_graph_rate(settings.timeout)
    if graph_rate is not None:
        logger.info("(Live) graph rate: %d.", graph_rate)


def apply_rate(settings: Settings, rate: int, options: List[int]) -> None:
    """Persists ``rate`` and makes it take effect.

    Raises:
        PersistError: If the rate could not be stored.
        RestartError: If the audio services could not be restarted.
    """
    if settings.mode == MODE_METADATA:
        set_forced_rate(rate, settings.timeout)
        return

    write_samplerate_conf(settings.samplerate_conf, rate, options)
    try:
        restart_pipewire_stack(settings.restart_plan, settings.timeout)
    except RestartError as e:
        raise RestartError(f"Updated file, but restart failed: {e}") from e


def run(args: argparse.Namespace) -> int:
    """Performs one switch (or --show) and returns the process exit code."""
    settings = resolve_settings(args)

    content = read_text_file(settings.sway_config)
    options = parse_rate_options(content, settings.start_marker, settings.end_marker)

    current = current_rate(settings)
    if current is None:
        logger.debug("Current rate unknown, starting from %d", options[0])
        current = options[0]

    if args.show:
        show(settings, options, current)
        return 0

    new_rate = next_rate(options, current)
    logger.debug("Switching %d -> %d (%s mode)", current, new_rate, settings.mode)

    try:
        apply_rate(settings, new_rate, options)
    except (PersistError, RestartError) as e:
        logger.error("%s", e)
        if settings.notify:
            notify_error(str(e))
        return 1

    key = "clock.force-rate" if settings.mode == MODE_METADATA else "default.clock.rate"
    print(f"Switched {key}: {current} -> {new_rate}")
    if settings.notify:
        notify_ok(current, new_rate, key)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        exit_code = run(args)
    except SwitcherError as e:
        # Malformed input or settings: nothing has been changed
        logger.error("Error: %s", e)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
