"""API Relay - server-side HTTP relay and request history for API testing."""

__version__ = "1.0.0"
