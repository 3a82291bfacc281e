"""
Image Upload Gateway - accepts image uploads and stores them in R2.

This package contains the complete application:
- core: Framework-agnostic upload rules and pipeline
- infrastructure: Object storage integration
- api: FastAPI routes, dependencies and the API key gate
- config: Application configuration
"""

__version__ = "0.1.0"
