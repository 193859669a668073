"""Service layer — operations returning ServiceResult.

Services may import from domain, layout, and infrastructure layers.
They must never import from commands or output.
"""
