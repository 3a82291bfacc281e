"""
Infrastructure layer - external service integrations.

- storage: Object storage (R2/S3)

These wrappers translate between external APIs and the core interfaces.
"""
