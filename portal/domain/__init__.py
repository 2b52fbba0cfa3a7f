"""Pure domain rules (record shape, validation, normalization)."""
