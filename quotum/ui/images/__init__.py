"""Remote image loading and pixmap helpers."""
