"""
HTTP layer: FastAPI routes, dependencies and the API key gate.
"""
