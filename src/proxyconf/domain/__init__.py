"""Domain layer — scalar types and configuration value objects.

This layer depends only on stdlib and pydantic.
It must never import from parser, sections, services, or commands.
"""
