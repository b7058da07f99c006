"""
Utility functions package for the SAR dog competition system.
"""

from .text_utils import TextUtils

__all__ = ['TextUtils']
