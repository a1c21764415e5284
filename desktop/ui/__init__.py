"""PyQt6 widgets for the desktop window."""
