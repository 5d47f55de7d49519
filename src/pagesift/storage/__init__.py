"""Run persistence and result export."""
