"""JSON file persistence: stores, paths, atomic writes and schema migration."""
