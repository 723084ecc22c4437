"""
Web application package for playing against the engine.

Provides a FastAPI REST API and a small browser board. Run locally with
`python -m web`.
"""
