"""Core runtime access, configuration and transfer utilities."""
