"""PySide6 desktop interface for GridSlice."""
