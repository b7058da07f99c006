"""
Models package for the SAR dog competition system.

This package contains all data models and dataclasses used throughout the system.
"""

from .actor import Actor
from .competition import Competition, Participant, Results
from .rating import RatingEntry, SaveReport

__all__ = ['Actor', 'Competition', 'Participant', 'Results', 'RatingEntry', 'SaveReport']
