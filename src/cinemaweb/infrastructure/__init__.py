"""Infrastructure layer — dataset retrieval from files and HTTP.

This layer depends on stdlib and third-party libs (httpx, pydantic).
It must never import from services, commands, or output.
"""
