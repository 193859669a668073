"""Layout layer — force simulation, frame scheduling, and the drag-aware engine.

Depends on the domain layer only. Never imports from services or commands.
"""
