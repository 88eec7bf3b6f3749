"""
Authentication module for the wound-care tracking system.

This module provides authentication and authorization functionality including:
- Registration of patients and clinicians with their profile records
- Login with bcrypt-verified passwords
- JWT access tokens and store-tracked, rotating refresh tokens
- Logout (refresh token revocation) and password change
- Role-based access control dependencies
"""
