"""Batch reconciliation pipeline and artifact writers."""
