"""Fuzzy matching of user-typed addresses against the offline gazetteer."""

from __future__ import annotations

from typing import NamedTuple, Sequence

from aavaverify import address, gazetteer
from aavaverify.models import AddressParts, GazetteerEntry

_DEFAULT_THRESHOLD = 0.5
_SUGGESTION_THRESHOLD = 0.3
_PREDICTION_THRESHOLD = 0.6


class Match(NamedTuple):
    entry: GazetteerEntry
    similarity: float


class AddressMatcher:
    """
    Ranks reference addresses by similarity to a partial user address.

    Stateless and cheap enough to call on every keystroke.
    """

    def __init__(self, entries: Sequence[GazetteerEntry] = gazetteer.ENTRIES):
        self._entries = tuple(entries)

    def find_similar(
        self, parts: AddressParts, threshold: float = _DEFAULT_THRESHOLD
    ) -> list[Match]:
        """
        Return entries scoring at least *threshold*, best first.

        Ties keep gazetteer order (sorted() is stable).
        """
        query = address.normalise(parts)
        matches = [
            Match(entry, address.similarity(query, address.normalise(entry.address_parts)))
            for entry in self._entries
        ]
        return sorted(
            (m for m in matches if m.similarity >= threshold),
            key=lambda m: m.similarity,
            reverse=True,
        )

    def get_suggestions(
        self, parts: AddressParts, max_results: int = 3
    ) -> list[GazetteerEntry]:
        """Up to *max_results* loosely matching entries for autocomplete."""
        matches = self.find_similar(parts, _SUGGESTION_THRESHOLD)
        return [m.entry for m in matches[:max_results]]

    def predict_normalized_address(self, parts: AddressParts) -> str:
        """
        Advisory display string for the address being typed.

        A confident gazetteer match wins; otherwise the plain normalised form.
        """
        matches = self.find_similar(parts, _PREDICTION_THRESHOLD)
        if matches:
            return matches[0].entry.display_name
        return address.normalise(parts)
