"""Domain services: mention extraction, comment trees, the mention ledger and feedback items."""
