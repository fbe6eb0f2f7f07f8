"""Shared helpers used across addrsync layers."""
