"""Setup steps, one module per menu action."""
