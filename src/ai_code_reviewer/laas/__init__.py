"""
LaaS Integration Layer

Client for the LaaS preset chat-completions API that produces the
per-file review text.
"""

from .client import LaaSClient

__all__ = ['LaaSClient']
