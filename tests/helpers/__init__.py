"""Shared helpers for inspect-http tests."""
