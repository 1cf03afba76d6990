"""Football match tagging core: event store, capture wizard, statistics and validation."""
