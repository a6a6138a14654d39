"""Configuration package for vidhost."""
