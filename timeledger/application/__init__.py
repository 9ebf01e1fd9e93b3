"""
Application layer: request/response DTOs and use cases.
"""
