"""
Text processing utilities for the SAR dog competition system.
"""

import re
from typing import Iterable, Optional


class TextUtils:
    """Utilities for text processing and normalization."""

    @staticmethod
    def normalize_category(label: str) -> str:
        """
        Normalize a class label as organizers type it.

        Labels are lowercased and a Latin 'v' is replaced by 'b', so
        "RH-FL-V" and "rh-fl-b" end up as the same class.
        """
        if not label:
            return ""
        return re.sub(r'\s+', ' ', label.strip()).lower().replace('v', 'b')

    @staticmethod
    def normalize_categories(labels: Iterable[str]) -> list:
        """Normalize a list (or a comma separated string) of class labels, dropping empties."""
        if isinstance(labels, str):
            labels = labels.split(',')
        normalized = []
        for label in labels or []:
            value = TextUtils.normalize_category(label)
            if value and value not in normalized:
                normalized.append(value)
        return normalized

    @staticmethod
    def same_label(first: Optional[str], second: Optional[str]) -> bool:
        """Case-insensitive comparison of two class labels."""
        if first is None or second is None:
            return False
        return first.strip().casefold() == second.strip().casefold()

    @staticmethod
    def find_label(label: str, candidates: Iterable[str]) -> Optional[str]:
        """Return the candidate matching label case-insensitively, if any."""
        for candidate in candidates:
            if TextUtils.same_label(label, candidate):
                return candidate
        return None

    @staticmethod
    def is_blank(text: Optional[str]) -> bool:
        return text is None or not str(text).strip()
