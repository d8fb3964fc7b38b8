"""Metadata models, playback configuration, pipe and subprocess audio sinks, and local-network device discovery."""

__version__ = "0.1.0"