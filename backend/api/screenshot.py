"""Vercel serverless entrypoint.

Vercel's Python runtime serves the ASGI ``app`` exported here at
/api/screenshot; the FastAPI router handles the path itself.
"""

from app.main import app  # noqa: F401
