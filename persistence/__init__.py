"""SQLite persistence: schema, connections and the user_settings key-value repository."""
