"""Core models for GridSlice."""
