"""Orchestrator components.

- Settings loaded from .env
- Structured logging
- Task graph planning and execution
- The paid-service workflow and its collaborator adapters
- A small CLI surface
"""
