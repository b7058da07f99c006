"""
Review and scoring package for the SAR dog competition system.
"""

from .scoring import ScoreCalculator
from .placement import PlacementCalculator
from .review_manager import ReviewManager, ReviewSession, ParticipantRef

__all__ = ['ScoreCalculator', 'PlacementCalculator', 'ReviewManager', 'ReviewSession', 'ParticipantRef']
