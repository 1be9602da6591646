"""Pure domain helpers: clock, DTOs and request parsing (no database I/O)."""
