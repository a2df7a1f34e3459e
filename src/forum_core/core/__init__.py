"""Core configuration, error taxonomy and token helpers."""
