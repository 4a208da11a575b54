"""Keyword index over holding names.

Maps each lowercase name token to the ordered list of collection positions
whose name contains it. Positions are renumbered on removal so the index
always mirrors the current order of the collection.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set


def tokenize(text: Optional[str]) -> List[str]:
    if text is None or not text.strip():
        return []
    return text.lower().split()


class KeywordIndex:
    def __init__(self) -> None:
        self._buckets: Dict[str, List[int]] = {}

    def index(self, name: str, position: int) -> None:
        for token in tokenize(name):
            self._buckets.setdefault(token, []).append(position)

    def remove_at(self, position: int) -> None:
        """Drop ``position`` everywhere and shift later positions down by one."""
        emptied: List[str] = []
        for token, positions in self._buckets.items():
            positions[:] = [p - 1 if p > position else p for p in positions if p != position]
            if not positions:
                emptied.append(token)
        for token in emptied:
            del self._buckets[token]

    def lookup(self, token: str) -> List[int]:
        return list(self._buckets.get(token.lower(), []))

    def query(self, tokens: Iterable[str]) -> Set[int]:
        """Positions whose name contains every token.

        An unknown token empties the result. Callers wanting "all positions"
        for an empty token list must not call this.
        """
        tokens = list(tokens)
        if not tokens:
            raise ValueError("query requires at least one token")

        matched: Optional[Set[int]] = None
        for token in tokens:
            positions = set(self._buckets.get(token.lower(), ()))
            matched = positions if matched is None else matched & positions
            if not matched:
                return set()
        return matched

    def buckets(self) -> Dict[str, List[int]]:
        return {token: list(positions) for token, positions in self._buckets.items()}

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token.lower() in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
