"""Command line interface for storeledger."""
