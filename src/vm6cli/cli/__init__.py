"""CLI commands."""

from . import config, main, node, task, vm

__all__ = ["config", "main", "node", "task", "vm"]
