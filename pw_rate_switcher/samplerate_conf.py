"""Read and write the PipeWire drop-in config that pins the default clock rate."""

import logging
import os
import re
from typing import Iterable, Optional

from pw_rate_switcher.exceptions import PersistError

logger = logging.getLogger(__name__)

# Matches anywhere in the file, even on the same line as the opening brace
CLOCK_RATE_PATTERN = re.compile(r'default\.clock\.rate\s*=\s*"?(\d{4,5})"?')


def read_rate_from_file(path: str) -> Optional[int]:
    """Returns the default.clock.rate stored in ``path``, or None if unknown."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            text = file.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read current rate from %s: %s", path, e)
        return None

    match = CLOCK_RATE_PATTERN.search(text)
    if match is None:
        logger.debug("No default.clock.rate entry in %s", path)
        return None
    return int(match.group(1))


def render_samplerate_conf(rate: int, allowed: Iterable[int]) -> str:
    """Renders the canonical drop-in config body."""
    allowed_rates = " ".join(str(r) for r in sorted(set(allowed)))
    return (
        "context.properties = {\n"
        f"    default.clock.rate          = {rate}\n"
        f"    default.clock.allowed-rates = [ {allowed_rates} ]\n"
        "}\n"
    )


def write_samplerate_conf(path: str, rate: int, allowed: Iterable[int]) -> None:
    """Overwrites ``path`` with the canonical config, creating parent directories.

    Raises:
        PersistError: If the directory or the file cannot be written.
    """
    text = render_samplerate_conf(rate, allowed)
    output_dir = os.path.dirname(path)
    try:
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
    except OSError as e:
        raise PersistError(f"Failed to update {path}: {e}.") from e

    logger.debug("Wrote default.clock.rate = %d to %s", rate, path)
