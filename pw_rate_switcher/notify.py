"""Best-effort desktop notifications through notify-send."""

import logging

from pw_rate_switcher.constants import (
    APP_NAME,
    NOTIFY_ERROR_TIMEOUT_MS,
    NOTIFY_OK_TIMEOUT_MS,
    NOTIFY_SUMMARY,
)
from pw_rate_switcher.utils import run_command

logger = logging.getLogger(__name__)

# Upper bound on waiting for the notification daemon
NOTIFY_TIMEOUT_SEC = 3.0


def _send(summary: str, body: str, icon: str, expire_ms: int, **hints) -> None:
    args = [
        "notify-send",
        f"--app-name={APP_NAME}",
        f"--icon={icon}",
        f"--expire-time={expire_ms}",
    ]
    for name, value in hints.items():
        args.append(f"--{name}={value}")
    args.extend([summary, body])

    result = run_command(args, timeout=NOTIFY_TIMEOUT_SEC)
    if not result.ok:
        logger.debug("Desktop notification not delivered (exit %d)", result.returncode)


def notify_ok(old_rate: int, new_rate: int, key: str = "default.clock.rate") -> None:
    """Announces a successful switch."""
    _send(
        NOTIFY_SUMMARY,
        f"Switched {key}: {old_rate} -> {new_rate} Hz.",
        icon="audio-card",
        expire_ms=NOTIFY_OK_TIMEOUT_MS,
        category="device",
    )


def notify_error(message: str) -> None:
    """Announces a failure."""
    _send(
        f"{NOTIFY_SUMMARY} - Error",
        message,
        icon="dialog-error",
        expire_ms=NOTIFY_ERROR_TIMEOUT_MS,
        urgency="critical",
    )
