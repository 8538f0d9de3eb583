"""Telemetry collection and scoring core."""
