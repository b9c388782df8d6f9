"""Import orchestration, preview, progress and summary services."""
