"""CLI commands for storeledger."""
