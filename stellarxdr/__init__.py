"""Parse Stellar transaction XDR and format its fields for display."""

__version__ = "5.0.1"

__all__ = ["formatting", "models", "operations", "strkey", "transaction", "xdr"]