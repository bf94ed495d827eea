"""Restart the PipeWire user services so a new default clock rate takes effect."""

import logging
from typing import List, Optional

from pw_rate_switcher.constants import DEFAULT_TIMEOUT
from pw_rate_switcher.data_types import RestartPlan, ServiceStep
from pw_rate_switcher.exceptions import RestartError
from pw_rate_switcher.utils import run_command

logger = logging.getLogger(__name__)


def run_steps(steps: List[ServiceStep], timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Runs every step in order.

    Returns:
        True if all required steps succeeded. Optional steps never count
        against the result, and a failed step does not stop the ones after it.
    """
    all_required_ok = True
    for step in steps:
        result = run_command(step.command(), timeout=timeout)
        if result.ok:
            logger.debug("systemctl %s: ok", step)
            continue
        if step.required:
            logger.warning("systemctl %s failed (exit %d)", step, result.returncode)
            all_required_ok = False
        else:
            logger.debug("systemctl %s failed (exit %d)", step, result.returncode)
    return all_required_ok


def restart_pipewire_stack(
    plan: Optional[RestartPlan] = None, timeout: float = DEFAULT_TIMEOUT
) -> None:
    """Restarts the audio stack, falling back to the plan's fallback steps.

    Raises:
        RestartError: If the primary steps fail and so does the fallback.
    """
    plan = plan or RestartPlan.default()

    if run_steps(plan.primary, timeout):
        logger.debug("Audio services restarted")
        return

    if not plan.fallback:
        raise RestartError("PipeWire/WirePlumber restart failed.")

    logger.info("Plain restart failed, trying fallback sequence")
    if run_steps(plan.fallback, timeout):
        logger.debug("Audio services restarted by fallback sequence")
        return

    raise RestartError(
        "PipeWire/WirePlumber restart failed (fallback sequence failed too)."
    )
