"""Service layer for vidhost."""
