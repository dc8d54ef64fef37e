"""Client for the downstream inventory router (turns queries into human-readable replies)."""
