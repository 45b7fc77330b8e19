"""School administration records kept in a local key-value store."""
