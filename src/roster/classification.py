"""Role and grade classification over free-text labels.

The schema carries no typed role flag: president, prime minister, minister
and pole-leader status are all read from human-written labels. Every
substring rule lives here so the aggregation code never matches text itself
and a typed schema can replace this class without touching the services.
"""

from __future__ import annotations

import unicodedata
from enum import Enum

__all__ = ["RoleKind", "RoleClassifier", "DEFAULT_CLASSIFIER", "normalize_label"]


class RoleKind(str, Enum):
    PRESIDENT = "president"
    PRIME_MINISTER = "prime_minister"
    MINISTER = "minister"
    OTHER = "other"


def normalize_label(text: str | None) -> str:
    """Composed, case-folded form of a label (empty for None).

    Surrounding whitespace is kept, so a padded label never equals an exact
    marker such as "président".
    """
    if not text:
        return ""
    return unicodedata.normalize("NFC", text).casefold()


class RoleClassifier:
    """Substring rules for French government labels.

    Matching is case-insensitive; accents are significant ("pole" does not
    match "pôle").
    """

    def __init__(
        self,
        *,
        president: str = "président",
        prime_minister: str = "premier",
        minister: str = "ministre",
        pole: str = "pôle",
    ) -> None:
        self._president = normalize_label(president)
        self._prime_minister = normalize_label(prime_minister)
        self._minister = normalize_label(minister)
        self._pole = normalize_label(pole)

    @property
    def pole_pattern(self) -> str:
        """ILIKE pattern handed to the data source for pole-leader filtering.

        The marker is matched literally: LIKE wildcards in it are escaped with
        the default backslash escape character.
        """
        escaped = self._pole.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"

    def classify(self, role: str | None) -> RoleKind:
        """Classify a person's `role` label.

        Exact match wins for president; the prime-minister marker is checked
        before the minister marker since "Premier ministre" carries both.
        """
        text = normalize_label(role)
        if not text:
            return RoleKind.OTHER
        if text == self._president:
            return RoleKind.PRESIDENT
        if self._prime_minister in text:
            return RoleKind.PRIME_MINISTER
        if self._minister in text:
            return RoleKind.MINISTER
        return RoleKind.OTHER

    def is_minister(self, role: str | None) -> bool:
        """True when the label names a ministerial post of any rank."""
        return self._minister in normalize_label(role)

    def mentions_pole(self, text: str | None) -> bool:
        return self._pole in normalize_label(text)

    def is_pole_leader(self, cabinet_role: str | None, grade_label: str | None) -> bool:
        return self.mentions_pole(cabinet_role) or self.mentions_pole(grade_label)


DEFAULT_CLASSIFIER = RoleClassifier()
