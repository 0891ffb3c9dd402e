"""Network transport for the Hearts table."""
