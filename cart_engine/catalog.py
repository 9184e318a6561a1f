"""Promotion catalog lookup"""

import logging
from datetime import date
from typing import Iterable, Optional, Protocol

from .models import Promotion

logger = logging.getLogger(__name__)


class PromotionCatalog(Protocol):
    """Resolves a promotion code; None means the code is unknown"""

    def lookup(self, code: str) -> Optional[Promotion]:
        ...


class InMemoryPromotionCatalog:
    """Dict-backed promotion catalog"""

    def __init__(self, promotions: Optional[Iterable[Promotion]] = None):
        self._promotions: dict[str, Optional[Promotion]] = {}
        for promotion in promotions or ():
            self.add(promotion)

    def add(self, promotion: Promotion) -> None:
        """Register a promotion, replacing any previous entry with the same code"""
        self._promotions[promotion.code] = promotion

    def register_unresolvable(self, code: str) -> None:
        """Register a code that is known but never resolves to a promotion"""
        self._promotions[code] = None

    def lookup(self, code: str) -> Optional[Promotion]:
        promotion = self._promotions.get(code)
        if promotion is None:
            logger.debug(f"Promotion code not found: {code}")
        return promotion

    def is_valid_promotion(self, code: str, on: date) -> bool:
        """Check that a code resolves and is active on the given date"""
        promotion = self.lookup(code)
        return promotion is not None and promotion.is_active(on)

    def codes(self) -> list[str]:
        return list(self._promotions)

    def __contains__(self, code: object) -> bool:
        return code in self._promotions

    def __len__(self) -> int:
        return len(self._promotions)
