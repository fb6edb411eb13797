"""
Command-line interface module for PropFlow.

This module provides the CLI entry point and command implementations for
inspecting property declarations and replaying events against them.
"""

from propflow.cli.main import main

__all__ = ["main"]
