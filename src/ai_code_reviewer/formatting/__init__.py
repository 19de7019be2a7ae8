"""
Review Formatter

This module provides console formatting for review runs.
"""

from .console import ConsoleFormatter

__all__ = ['ConsoleFormatter']
