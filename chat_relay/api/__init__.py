"""Chat relay API adapter package.

Architectural role:
- Defines the HTTP boundary: body parsing, error-to-response mapping, static files.
- Provides the `uvicorn` server entrypoint.
- Delegates relay work to the core layer.
"""
