"""
Registration package for the SAR dog competition system.
"""

from .registration_manager import RegistrationManager

__all__ = ['RegistrationManager']
