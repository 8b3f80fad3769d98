"""Domain events published by the account lifecycle."""
