"""Secrets schema migration runner package."""
