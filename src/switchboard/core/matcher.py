"""Edit-distance ranking of command identifiers."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

CANONICAL_SEPARATOR = ":"
DISPLAY_SEPARATOR = " "
_SEPARATOR_RE = re.compile(r"[:\s]+")


def split_identifier(raw: str) -> list[str]:
    """Split a colon- or space-joined identifier into its path segments."""

    return [segment for segment in _SEPARATOR_RE.split(raw.strip()) if segment]


def normalize_identifier(raw: str) -> str:
    return CANONICAL_SEPARATOR.join(split_identifier(raw))


def display_identifier(identifier: str, separator: str = DISPLAY_SEPARATOR) -> str:
    return separator.join(split_identifier(identifier))


@dataclass(frozen=True)
class MatchPolicy:
    """How far a candidate may be from the query and still be suggested.

    The allowance grows with the length of the measured query so that one or
    two character typos in long command paths are forgiven while short words
    must match almost exactly.
    """

    ratio: float = 0.34
    min_distance: int = 1

    def threshold(self, query_length: int) -> int:
        return max(self.min_distance, int(query_length * self.ratio))

    def is_eligible(self, distance: int, query_length: int) -> bool:
        return distance == 0 or distance <= self.threshold(query_length)


DEFAULT_POLICY = MatchPolicy()


@dataclass(frozen=True)
class MatchCandidate:
    """One eligible identifier and its distance to the query."""

    identifier: str
    distance: int
    topic_only: bool = False

    def sort_key(self) -> tuple[int, int, str]:
        return (self.distance, len(self.identifier), self.identifier)


def rank(
    query: str,
    identifiers: Iterable[str],
    *,
    topics: Iterable[str] = (),
    policy: MatchPolicy = DEFAULT_POLICY,
) -> list[MatchCandidate]:
    """Return eligible candidates for ``query``, closest first.

    When the first query segment names a known topic, only identifiers under
    that topic are considered and distance is measured on what follows the
    topic, so ``channels pubish`` is compared against ``channels:*`` only.
    """

    normalized_query = normalize_identifier(query)
    if not normalized_query:
        return []

    runnable = {normalize_identifier(item) for item in identifiers}
    topic_set = {normalize_identifier(item) for item in topics}
    runnable.discard("")
    topic_set.discard("")
    pool = runnable | topic_set

    prefix = ""
    segments = normalized_query.split(CANONICAL_SEPARATOR)
    if len(segments) > 1 and segments[0] in topic_set:
        prefix = segments[0] + CANONICAL_SEPARATOR
        pool = {candidate for candidate in pool if candidate.startswith(prefix)}

    measured_query = normalized_query[len(prefix) :]
    limit = policy.threshold(len(measured_query))

    matches: list[MatchCandidate] = []
    for candidate in pool:
        distance = Levenshtein.distance(measured_query, candidate[len(prefix) :], score_cutoff=limit)
        if not policy.is_eligible(distance, len(measured_query)):
            continue
        matches.append(
            MatchCandidate(
                identifier=candidate,
                distance=distance,
                topic_only=candidate in topic_set and candidate not in runnable,
            )
        )

    matches.sort(key=MatchCandidate.sort_key)
    return matches
