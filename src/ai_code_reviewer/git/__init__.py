"""
Git Integration Layer

This module provides staged file discovery and per-file patch retrieval
on top of the git command line.
"""

from .client import GitClient
from .parser import PatchParser

__all__ = ['GitClient', 'PatchParser']
