"""CLI command implementations for the Media Optimizer."""

from .run import RunCommand

__all__ = ['RunCommand']
