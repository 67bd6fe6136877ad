"""Level analysis tools."""
