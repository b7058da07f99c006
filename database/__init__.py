"""
Database package for the SAR dog competition system.
"""

from .database_manager import DatabaseManager
from .competition_repository import CompetitionRepository
from .profile_repository import ProfileRepository
from .competition_manager import CompetitionManager

__all__ = ['DatabaseManager', 'CompetitionRepository', 'CompetitionManager', 'ProfileRepository']
