"""Service layer — operations returning ServiceResult.

Services may import from domain, parser, sections, and infrastructure.
They must never import from commands or output.
"""
