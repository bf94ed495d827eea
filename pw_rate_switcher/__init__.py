"""Cycle the PipeWire default sample rate among the rates listed in the Sway config."""

__version__ = "1.2.0"
