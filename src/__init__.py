"""vaultport — convert Day One journal exports into Obsidian vaults."""

__version__ = "0.3.0"
