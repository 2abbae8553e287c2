"""Bounded contexts: documents, resolution, portability."""
