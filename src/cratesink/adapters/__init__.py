"""Adapters connecting the core to databases."""
