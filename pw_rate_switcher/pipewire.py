"""Query and set the live PipeWire clock settings through pw-metadata."""

import logging
import re
from typing import Dict, Optional

from pw_rate_switcher.constants import DEFAULT_TIMEOUT
from pw_rate_switcher.exceptions import PersistError
from pw_rate_switcher.utils import run_command

logger = logging.getLogger(__name__)

METADATA_LINE_PATTERN = re.compile(r"key:'([^']+)'\s+value:'([^']*)'")

CLOCK_RATE_KEY = "clock.rate"
FORCE_RATE_KEY = "clock.force-rate"


def parse_metadata(output: str) -> Dict[str, str]:
    """Parses ``pw-metadata`` output into a key/value mapping.

    Lines look like ``update: id:0 key:'clock.rate' value:'48000' type:''``.
    Lines in any other shape are skipped.
    """
    settings = {}
    for line in output.splitlines():
        match = METADATA_LINE_PATTERN.search(line)
        if match:
            settings[match.group(1)] = match.group(2)
    return settings


def _read_setting(key: str, timeout: float) -> Optional[int]:
    result = run_command(["pw-metadata", "-n", "settings", "0", key], timeout=timeout)
    if not result.ok:
        return None

    value = parse_metadata(result.stdout).get(key, "")
    try:
        return int(value)
    except ValueError:
        logger.debug("Unexpected %s value from pw-metadata: %r", key, value)
        return None


def read_graph_rate(timeout: float = DEFAULT_TIMEOUT) -> Optional[int]:
    """Returns the rate the PipeWire graph is running at, or None if unknown."""
    rate = _read_setting(CLOCK_RATE_KEY, timeout)
    return rate if rate else None


def read_forced_rate(timeout: float = DEFAULT_TIMEOUT) -> Optional[int]:
    """Returns the forced graph rate, or None when no rate is forced."""
    rate = _read_setting(FORCE_RATE_KEY, timeout)
    # 0 clears the override
    return rate if rate else None


def set_forced_rate(rate: int, timeout: float = DEFAULT_TIMEOUT) -> None:
    """Forces the graph to run at ``rate``.

    Raises:
        PersistError: If pw-metadata fails.
    """
    result = run_command(
        ["pw-metadata", "-n", "settings", "0", FORCE_RATE_KEY, str(rate)],
        timeout=timeout,
    )
    if not result.ok:
        detail = result.stderr.strip() or result.stdout.strip() or "no output"
        raise PersistError(
            f"pw-metadata could not set {FORCE_RATE_KEY} to {rate} "
            f"(exit {result.returncode}): {detail}."
        )
    logger.debug("Set %s = %d", FORCE_RATE_KEY, rate)
