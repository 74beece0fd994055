"""Prometheus exporter for Duplicati backup reports."""
