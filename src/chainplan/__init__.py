"""chainplan — idempotent contract deployment plans with linkage reconciliation."""

__version__ = "0.1.0"
