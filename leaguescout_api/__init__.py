"""League Scout backend - FACEIT league scouting API.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for external services
- api: REST and WebSocket endpoints
"""

__version__ = "1.0.0"
