"""Domain layer — records, graph types, and the graph builder.

This layer depends only on stdlib, pydantic, and NetworkX.
It must never import from layout, services, infrastructure, commands, or config.
"""
