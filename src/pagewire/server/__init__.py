"""ASGI server pipeline: request handling, content negotiation, errors."""
