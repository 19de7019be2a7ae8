"""
Review Pipeline

This module provides change set discovery, per-file diff fetching and
the orchestrator that fans out the reviews.
"""

from .discoverer import ChangeSetDiscoverer
from .fetcher import FileDiffFetcher
from .orchestrator import ReviewOrchestrator

__all__ = ['ChangeSetDiscoverer', 'FileDiffFetcher', 'ReviewOrchestrator']
