"""
Authentication module for the EMR backend.

This module provides:
- Doctor signup with assigned display names
- Login returning a JWT bearer token
- Current-user resolution for the doctor-scoped routes
"""
