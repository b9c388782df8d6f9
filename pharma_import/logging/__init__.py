"""Console logging and JSON Lines error log."""
