"""Command line interface for resilient-ops."""
