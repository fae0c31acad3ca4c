"""Core errors and settings shared across hone."""
