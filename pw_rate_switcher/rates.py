"""Parse the allowed sample rates from the Sway config and pick the next one."""

import logging
import re
from typing import List, Optional, Sequence

from pw_rate_switcher.constants import END_MARKER, OPTIONS_PREFIX, START_MARKER
from pw_rate_switcher.exceptions import (
    MarkerNotFoundError,
    MarkerOrderError,
    NoRatesFoundError,
    OptionsLineNotFoundError,
)

logger = logging.getLogger(__name__)

# A standalone run of 4 or 5 digits, e.g. 44100 or 8000 but not 192000
RATE_PATTERN = re.compile(r"(?<!\d)(\d{4,5})(?!\d)")


def _find_marker(lines: List[str], marker: str) -> int:
    for idx, line in enumerate(lines):
        if marker in line:
            return idx
    raise MarkerNotFoundError(f"Marker '{marker}' not found in sway config.")


def parse_rate_options(
    content: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> List[int]:
    """Extracts the allowed sample rates from the marked block of a config.

    The block is delimited by the first line containing ``start_marker`` and
    the first line containing ``end_marker``. Inside it, the first line that
    starts with ``# Sample Rate Options =`` lists the rates.

    Args:
        content: Full text of the config file.
        start_marker: Text identifying the first line of the block.
        end_marker: Text identifying the last line of the block.

    Returns:
        The rates, sorted ascending with duplicates removed.

    Raises:
        MarkerNotFoundError: If either marker is missing.
        MarkerOrderError: If the end marker does not come after the start marker.
        OptionsLineNotFoundError: If the block has no options line.
        NoRatesFoundError: If the options line has no 4 or 5 digit numbers.
    """
    lines = content.splitlines()
    start_idx = _find_marker(lines, start_marker)
    end_idx = _find_marker(lines, end_marker)
    if end_idx <= start_idx:
        raise MarkerOrderError("Options End marker appears before Start marker.")

    options_line = next(
        (
            line
            for line in lines[start_idx : end_idx + 1]
            if line.lstrip().startswith(OPTIONS_PREFIX)
        ),
        None,
    )
    if options_line is None:
        raise OptionsLineNotFoundError(
            f"Could not find a line like '{OPTIONS_PREFIX} 44100, 48000' "
            "in the options block."
        )

    rates = sorted({int(match) for match in RATE_PATTERN.findall(options_line)})
    if not rates:
        raise NoRatesFoundError(
            f"No sample-rate numbers found on options line: {options_line.strip()}."
        )

    logger.debug("Parsed sample rate options: %s", rates)
    return rates


def next_rate(allowed: Sequence[int], current: Optional[int]) -> int:
    """Returns the rate after ``current`` in ``allowed``, wrapping around.

    An unknown ``current`` (not in ``allowed``, or None) yields the first rate.
    """
    try:
        idx = list(allowed).index(current)
    except ValueError:
        return allowed[0]
    return allowed[(idx + 1) % len(allowed)]
