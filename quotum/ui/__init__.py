"""PyQt6 widgets for the admin post feed and editor."""
