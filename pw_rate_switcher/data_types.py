"""Types used in the pw_rate_switcher package."""

from dataclasses import dataclass, field
from typing import List, Optional

from pw_rate_switcher.constants import (
    DEFAULT_RESTART_PLAN,
    DEFAULT_SAMPLERATE_CONF,
    DEFAULT_SWAY_CONFIG,
    DEFAULT_TIMEOUT,
    END_MARKER,
    MODE_FILE,
    SERVICE_ACTIONS,
    START_MARKER,
    SUPPORTED_MODES,
)


@dataclass
class CommandResult:
    """Outcome of an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0


@dataclass
class ServiceStep:
    """One `systemctl --user` invocation in a restart plan."""

    action: str
    units: List[str]
    required: bool = True

    def __post_init__(self) -> None:
        """Validate the action, the unit list and the required flag."""
        if self.action not in SERVICE_ACTIONS:
            raise ValueError(
                f"Invalid service action '{self.action}'. "
                f"Must be one of: {', '.join(SERVICE_ACTIONS)}."
            )
        if isinstance(self.units, str):
            self.units = [self.units]
        if not self.units or not all(
            isinstance(unit, str) and unit for unit in self.units
        ):
            raise ValueError("Service step must name at least one unit.")
        if not isinstance(self.required, bool):
            raise ValueError("Service step 'required' must be true or false.")

    def command(self) -> List[str]:
        """The systemctl command line for this step."""
        return ["systemctl", "--user", self.action, *self.units]

    def __str__(self) -> str:
        suffix = "" if self.required else " (optional)"
        return f"{self.action} {' '.join(self.units)}{suffix}"


def _steps_from_dicts(steps: List[dict]) -> List[ServiceStep]:
    return [ServiceStep(**step) for step in steps]


@dataclass
class RestartPlan:
    """Steps tried first, and the steps tried only if those fail."""

    primary: List[ServiceStep]
    fallback: List[ServiceStep] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.primary:
            raise ValueError("Restart plan needs at least one primary step.")

    @classmethod
    def from_dict(cls, plan: dict) -> "RestartPlan":
        """Build a plan from its settings-file representation."""
        return cls(
            primary=_steps_from_dicts(plan.get("primary", [])),
            fallback=_steps_from_dicts(plan.get("fallback", [])),
        )

    @classmethod
    def default(cls) -> "RestartPlan":
        """The stock PipeWire / WirePlumber plan."""
        return cls.from_dict(DEFAULT_RESTART_PLAN)


@dataclass
class Settings:
    """Resolved runtime settings."""

    sway_config: str = DEFAULT_SWAY_CONFIG
    samplerate_conf: str = DEFAULT_SAMPLERATE_CONF
    mode: str = MODE_FILE
    notify: bool = True
    timeout: float = DEFAULT_TIMEOUT
    start_marker: str = START_MARKER
    end_marker: str = END_MARKER
    restart_plan: Optional[RestartPlan] = None

    def __post_init__(self) -> None:
        """Validate the mode, the timeout and the markers."""
        if self.mode not in SUPPORTED_MODES:
            raise ValueError(
                f"Invalid mode '{self.mode}'. "
                f"Must be one of: {', '.join(SUPPORTED_MODES)}."
            )
        if isinstance(self.timeout, bool) or not isinstance(
            self.timeout, (int, float)
        ):
            raise ValueError("timeout must be a number of seconds.")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive.")
        if not all(
            isinstance(marker, str) and marker
            for marker in (self.start_marker, self.end_marker)
        ):
            raise ValueError("Block markers must be non-empty strings.")
        if self.restart_plan is None:
            self.restart_plan = RestartPlan.default()
