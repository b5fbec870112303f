"""Upload, poll and generate pipeline."""
