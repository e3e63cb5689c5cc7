"""Online examination portal."""
