"""
HTTP API package for the SAR dog competition system.
"""

from .app import create_app

__all__ = ['create_app']
