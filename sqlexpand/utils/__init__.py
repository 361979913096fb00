"""Utility helpers for sqlexpand."""
