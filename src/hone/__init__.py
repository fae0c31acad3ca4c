"""hone: PRD and task planning helpers with crash-consistent file updates."""

__version__ = "0.1.0"
