"""Helpers for turning rendered bodies into HTTP responses."""
