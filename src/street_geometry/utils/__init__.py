"""Helpers shared by the resolver components."""
