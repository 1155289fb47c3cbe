"""
Settlement Extraction Relay.

A thin FastAPI service that forwards base64 settlement documents to the
Anthropic Messages API and relays the structured JSON extraction back.
"""

__version__ = "1.0.0"
