"""Authentication and input validation helpers."""
