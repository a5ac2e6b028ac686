"""UI-agnostic domain code: DTOs, editing, pagination, grouping, API, settings."""
