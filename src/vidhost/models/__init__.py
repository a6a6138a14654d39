"""Data models for vidhost."""
