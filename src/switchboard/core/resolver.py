"""Correct mistyped command identifiers against the registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from loguru import logger

from switchboard.core.matcher import (
    CANONICAL_SEPARATOR,
    DEFAULT_POLICY,
    MatchCandidate,
    MatchPolicy,
    rank,
    split_identifier,
)
from switchboard.core.types import CommandRegistry


@dataclass(frozen=True)
class Dispatch:
    """Run ``matched_id`` with ``forwarded_args``."""

    matched_id: str
    forwarded_args: list[str] = field(default_factory=list)
    typed_id: str = ""
    distance: int = 0

    @property
    def corrected(self) -> bool:
        return self.typed_id != self.matched_id


@dataclass(frozen=True)
class NotFound:
    """Nothing known is close enough to ``raw_id``."""

    raw_id: str


Outcome: TypeAlias = Dispatch | NotFound


def _preference(candidate: MatchCandidate, size: int) -> tuple[bool, int, int, int, str]:
    return (candidate.topic_only, candidate.distance, -size, len(candidate.identifier), candidate.identifier)


class CommandResolver:
    """Turn an unknown command identifier into the closest known one.

    Every split of the typed segments into ``command path + trailing args`` is
    ranked. Runnable commands are preferred over bare topics, then the closest
    eligible match wins, ties go to the longer path and then the shorter name.
    Trailing segments that were not part of the match are forwarded as
    arguments ahead of ``forwarded_args``, which are never inspected.
    """

    def __init__(self, registry: CommandRegistry, policy: MatchPolicy = DEFAULT_POLICY) -> None:
        self._registry = registry
        self._policy = policy

    def resolve(self, raw_id: str, forwarded_args: list[str]) -> Outcome:
        segments = split_identifier(raw_id)
        if not segments:
            return NotFound(raw_id)

        identifiers = [*self._registry.list_identifiers(), *self._registry.list_aliases()]
        topics = self._registry.list_topics()

        found: list[tuple[MatchCandidate, int]] = []
        for size in range(len(segments), 0, -1):
            query = CANONICAL_SEPARATOR.join(segments[:size])
            matches = rank(query, identifiers, topics=topics, policy=self._policy)
            found.extend((match, size) for match in matches)

        if not found:
            logger.debug("resolver.miss raw_id={}", raw_id)
            return NotFound(raw_id)

        # Runnable commands beat bare topics, then closer beats longer.
        candidate, size = min(found, key=lambda item: _preference(*item))
        target = self._registry.find_alias_target(candidate.identifier) or candidate.identifier
        tail = segments[size:]
        logger.debug(
            "resolver.match raw_id={} target={} distance={} forwarded={}",
            raw_id,
            target,
            candidate.distance,
            len(tail) + len(forwarded_args),
        )
        if candidate.topic_only:
            # A bare topic only shows its own help; nothing after it is meaningful.
            return Dispatch(
                matched_id=target,
                forwarded_args=[],
                typed_id=CANONICAL_SEPARATOR.join(segments),
                distance=candidate.distance,
            )
        return Dispatch(
            matched_id=target,
            forwarded_args=[*tail, *forwarded_args],
            typed_id=CANONICAL_SEPARATOR.join(segments[:size]),
            distance=candidate.distance,
        )
