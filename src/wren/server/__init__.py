"""ASGI plumbing: request handling, response sending, error mapping."""
