"""
Authentication module for the diagnostics portal.

This module provides authentication and authorization functionality including:
- Registration with role-conditional approval
- Role-scoped login and separate admin login
- JWT token authentication
- Role-based access control
"""
