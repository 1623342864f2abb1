"""Shared normalization and validation helpers for the canonical row schema."""
