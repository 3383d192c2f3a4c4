"""Batch services: the daily generation scheduler."""
