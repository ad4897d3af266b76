"""memkit command-line interface."""
