"""
core/match_cache.py — Redis-backed cache of per-term phenotype match lookups.

The mapping tables are static for a given data release, so a lookup of
(organism, query term) always returns the same set of matches.  Caching them
in Redis saves a MongoDB round-trip per query term on repeated analyses.

A broken or unreachable Redis only costs speed: every failure is logged and
reported as a cache miss.
"""

from __future__ import annotations

import json
import logging

import redis

from core.models import Organism, PhenotypeMatch

logger = logging.getLogger(__name__)


class MatchCache:
    """Thin wrapper around Redis for cached phenotype matches."""

    def __init__(self, redis_url: str, ttl: int = 86400) -> None:
        """
        Connect to Redis.

        Parameters
        ----------
        redis_url : str
            Full Redis connection string (e.g. ``redis://default:pw@host:port``).
        ttl : int
            Expiry of each cached entry, in seconds.
        """
        self._r = redis.from_url(redis_url, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(organism: Organism, hpo_id: str) -> str:
        return f"matches:{organism.value}:{hpo_id}"

    def get_matches(self, organism: Organism, hpo_id: str) -> set[PhenotypeMatch] | None:
        """Return the cached matches for the term, or ``None`` on a miss."""
        try:
            raw = self._r.get(self._key(organism, hpo_id))
        except redis.RedisError as exc:
            logger.error("Redis get_matches failed: %s", exc)
            return None
        if raw is None:
            return None
        return {PhenotypeMatch.model_validate(item) for item in json.loads(raw)}

    def set_matches(self, organism: Organism, hpo_id: str, matches: set[PhenotypeMatch]) -> None:
        """Store the matches for the term. An empty set is cached too."""
        payload = json.dumps([m.model_dump() for m in matches])
        try:
            self._r.set(self._key(organism, hpo_id), payload, ex=self.ttl)
        except redis.RedisError as exc:
            logger.error("Redis set_matches failed: %s", exc)

    def clear(self) -> int:
        """Remove every cached match entry. Returns the number of keys removed."""
        removed = 0
        try:
            for key in self._r.scan_iter(match="matches:*"):
                removed += self._r.delete(key)
        except redis.RedisError as exc:
            logger.error("Redis clear failed: %s", exc)
        return removed
