"""Account authentication and credential lifecycle service."""
