"""Custom exceptions for the PipeWire sample rate switcher."""


class SwitcherError(Exception):
    """Base exception for all switcher errors."""


class ConfigFileNotFoundError(SwitcherError):
    """Raised when a configuration file cannot be read."""


class YAMLParsingError(SwitcherError):
    """Raised when the settings file is not valid YAML."""


class ConfigurationError(SwitcherError):
    """Raised when the settings are invalid."""


class RateOptionsError(SwitcherError):
    """Raised when the rate options block in the Sway config is malformed."""


class MarkerNotFoundError(RateOptionsError):
    """Raised when a block marker is missing."""


class MarkerOrderError(RateOptionsError):
    """Raised when the end marker appears before the start marker."""


class OptionsLineNotFoundError(RateOptionsError):
    """Raised when the block has no options line."""


class NoRatesFoundError(RateOptionsError):
    """Raised when the options line lists no sample rates."""


class PersistError(SwitcherError):
    """Raised when the new sample rate cannot be stored."""


class RestartError(SwitcherError):
    """Raised when the audio services could not be restarted."""
