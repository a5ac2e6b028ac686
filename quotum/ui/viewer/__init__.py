"""Read-only post viewer: per-coin public feed and single-post detail."""
