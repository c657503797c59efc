"""
setup-gauge CLI module.

This module provides the command-line interface for setup-gauge.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
