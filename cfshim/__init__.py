"""cfshim - an OpenAI-compatible shim for Cloudflare Workers AI

Accepts OpenAI Chat Completions requests, runs them on a Workers AI model
and translates the answer back, including emulated SSE streaming.

This package provides:
- ChatService: one chat request to one backend call (plus a prompt fallback)
- ModelRegistry: public model ids mapped to Workers AI models and dialects
- create_app: the FastAPI application with /v1/chat/completions,
  /v1/models and /health

Example:
    >>> from cfshim.main import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="0.0.0.0", port=8000)
"""

__version__ = "0.1.0"
