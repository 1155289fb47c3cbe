"""
Services package for the extraction relay.

Contains:
- ai: Validation, prompt and upstream client modules
- relay_service: The relay shared by the server and function adapters
"""

from .relay_service import error_response, relay_extraction

__all__ = ["error_response", "relay_extraction"]
