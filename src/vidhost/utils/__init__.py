"""Utility helpers shared across vidhost modules."""
