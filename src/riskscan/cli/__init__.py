"""Command-line interface.

Provides:
- cli: AsyncClick group with analyze, check and info commands
"""

from .analyze import cli

__all__ = ["cli"]
