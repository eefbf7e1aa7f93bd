"""Locator services."""
