"""Adapters feeding third-party activity into actionkit feeds."""
