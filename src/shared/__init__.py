"""Shared utilities used across vaultport domains."""
