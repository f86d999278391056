"""Core privileged-execution components for fsgate."""
