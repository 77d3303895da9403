"""Typed workout sets and unit conversion.

All distances are stored in miles, weights in pounds, heights in inches and
durations in whole seconds. Which measurement fields a set may carry is
decided by its exercise's primary type.
"""
