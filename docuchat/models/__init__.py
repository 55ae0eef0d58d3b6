"""
Pydantic domain models and API schemas.

Wire shapes use camelCase keys (sessionId, isUser, documentName) and
accept either camelCase or snake_case on input.
"""
