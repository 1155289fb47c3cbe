"""
Serverless function adapters for the extraction relay.
"""

from .handler import handle_event, handler

__all__ = ["handle_event", "handler"]
