"""SQLite access used by the schema repair checker and validators."""
