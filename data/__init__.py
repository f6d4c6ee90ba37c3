"""Synthetic data generators for development and tests."""
