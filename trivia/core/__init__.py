"""Core gameplay primitives (events emitted to the view layer).

Kept free of FastAPI concerns so it can be reused by API routes, the session clock, and tests.
"""
