"""
Common utilities for route handlers.

Provides shared functionality to reduce code duplication:
- Error handlers for the application error taxonomy
- Rate limiting keys
- Request validation and response formatting
"""
