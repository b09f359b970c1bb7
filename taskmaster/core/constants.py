"""Core constants: shared literal values for the HTTP layer."""

# Upper bound for POST /access/decisions/batch.
MAX_BATCH_REQUESTS = 100
