"""Adapters connecting the core to hosts, sinks and logging."""
