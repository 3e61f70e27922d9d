"""Settings, database session wiring, password hashing, domain exceptions and their HTTP mapping."""
