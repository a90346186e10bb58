"""
Command-line interface for the trafficmon package.

This module provides the main CLI entry point for the traffic collector.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
