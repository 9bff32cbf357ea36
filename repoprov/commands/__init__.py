"""Click commands for repoprov."""
