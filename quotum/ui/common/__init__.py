"""Shared UI building blocks: theme, pagination controls, helpers."""
