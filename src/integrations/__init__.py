"""
Integrations for external services.

This package contains the client that forwards processed Nylas webhook
deltas to the main application.
"""
