"""Core astrograph logic, independent of the terminal interface."""
