"""State for a gaming chain: ledger primitives, minting parameters and web configuration."""

__version__ = "0.1.0"