"""Schemas module."""
