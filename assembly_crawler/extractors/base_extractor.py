"""
Named heuristic strategies.

Scraped pages do not have a stable structure, so each field is located
by an ordered list of strategies; the first one that produces a value
wins and its name is logged for diagnosis.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[S, T]):
    """A named way of locating a value in a subject (usually a DOM root)"""

    name: str
    locate: Callable[[S], Optional[T]]

    def __call__(self, subject: S) -> Optional[T]:
        return self.locate(subject)


def first_success(strategies: Iterable[Strategy[S, T]], subject: S) -> Optional[T]:
    """Return the first non-None result, or None if every strategy misses"""
    for strategy in strategies:
        result = strategy(subject)
        if result is not None:
            logger.debug(f"Strategy '{strategy.name}' matched")
            return result
    return None
