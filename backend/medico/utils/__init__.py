"""Utility helpers."""

from .auth import create_access_token, decode_access_token, get_current_user_email

__all__ = ['create_access_token', 'decode_access_token', 'get_current_user_email']
