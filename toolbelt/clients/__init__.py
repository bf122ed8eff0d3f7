"""
Clients for the platform APIs.
"""

from .base import ApiClient
from .rewriter import RewriterClient
from .workspaces import WorkspacesClient

__all__ = ['ApiClient', 'RewriterClient', 'WorkspacesClient']
