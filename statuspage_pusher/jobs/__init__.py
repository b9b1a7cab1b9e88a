"""Long-running jobs."""
