"""Core session logic: key derivation, document stores and chunk reconciliation."""
