"""Garment attribute model."""
