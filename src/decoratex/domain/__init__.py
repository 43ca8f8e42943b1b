"""Domain layer: descriptors, registry, selection, record slots.

This layer depends only on stdlib and pydantic.
It must never import from services, config, or schema.
"""
