"""Canonical exercise catalog.

This module provides:
- The Exercise record and catalog snapshot written to exercises.json
- Name-based inference of primary type, equipment and category
- An append-only builder that assigns ids to newly seen exercises
"""
