"""Run coordination and progress reporting."""
