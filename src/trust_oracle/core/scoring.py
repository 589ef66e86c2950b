"""Trust scoring from graph distance facts.

Formula: score = base + path bonus, clamped to [0, 1].

The base weight decays with hop distance (1 hop = 100%, 2 hops = 50%, ...).
Multiple shortest paths add a bonus per extra path, capped so redundancy
never fully offsets distance. Direct follows (1 hop) get no bonus.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .models import (
    DEFAULT_SCORING,
    DistanceInfo,
    Identity,
    PerHopPathBonus,
    ScalarPathBonus,
    ScoringConfig,
    TrustAssessment,
    TrustLevel,
)

logger = logging.getLogger(__name__)

# Distances past this are scored like this distance.
MAX_SCORED_HOPS = 4

FALLBACK_DISTANCE_WEIGHT = 0.1
FALLBACK_PER_HOP_BONUS = 0.05
FALLBACK_SCALAR_BONUS = 0.1
FALLBACK_MAX_PATH_BONUS = 0.5

# Inclusive lower bounds, highest first.
TRUST_LEVEL_THRESHOLDS: tuple[tuple[float, TrustLevel], ...] = (
    (0.9, TrustLevel.VERY_HIGH),
    (0.5, TrustLevel.HIGH),
    (0.25, TrustLevel.MEDIUM),
    (0.1, TrustLevel.LOW),
)


def resolve_weight(
    partial: Optional[Mapping[int, float]],
    defaults: Mapping[int, float],
    key: int,
    fallback: float,
) -> float:
    """Look up ``key`` in the partial config, then the defaults, then fall back."""
    if partial is not None and partial.get(key) is not None:
        return partial[key]
    if defaults.get(key) is not None:
        return defaults[key]
    return fallback


def base_weight(hops: int, config: ScoringConfig = DEFAULT_SCORING) -> float:
    """Distance weight for ``hops`` before any path bonus."""
    hop_key = min(hops, MAX_SCORED_HOPS)
    return resolve_weight(
        config.distance_weights,
        DEFAULT_SCORING.distance_weights,
        hop_key,
        FALLBACK_DISTANCE_WEIGHT,
    )


def _path_bonus_per_path(hop_key: int, config: ScoringConfig) -> float:
    bonus = config.path_bonus
    if isinstance(bonus, PerHopPathBonus):
        return resolve_weight(
            bonus.weights,
            DEFAULT_SCORING.path_bonus.weights,
            hop_key,
            FALLBACK_PER_HOP_BONUS,
        )
    if isinstance(bonus, ScalarPathBonus) and bonus.value is not None:
        return bonus.value
    return FALLBACK_SCALAR_BONUS


def path_bonus(hops: int, paths: Optional[int], config: ScoringConfig = DEFAULT_SCORING) -> float:
    """Bonus for redundant shortest paths, capped at ``config.max_path_bonus``."""
    if paths is None or paths <= 1 or hops <= 1:
        return 0.0
    per_path = _path_bonus_per_path(min(hops, MAX_SCORED_HOPS), config)
    cap = config.max_path_bonus if config.max_path_bonus is not None else FALLBACK_MAX_PATH_BONUS
    return min(per_path * (paths - 1), cap)


def calculate_score(
    hops: Optional[int],
    paths: Optional[int] = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Calculate a trust score from hop distance and shortest-path count.

    Args:
        hops: Shortest-path length (0 = self, 1 = direct follow), None if unreachable.
        paths: Number of shortest paths, None if unknown.
        config: Scoring weights. Missing keys fall back to DEFAULT_SCORING.

    Returns:
        Score between 0 and 1.
    """
    if hops == 0:
        return 1.0
    if hops is None:
        return 0.0

    score = base_weight(hops, config) + path_bonus(hops, paths, config)
    return min(max(score, 0.0), 1.0)


def get_trust_level(score: Optional[float]) -> TrustLevel:
    """Map a score to a human-readable trust level."""
    if score is None:
        return TrustLevel.UNKNOWN
    for threshold, level in TRUST_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return TrustLevel.VERY_LOW


def assess(info: Optional[DistanceInfo], config: ScoringConfig = DEFAULT_SCORING) -> TrustAssessment:
    """Score one distance answer. A missing answer means no path."""
    hops = info.hops if info is not None else None
    paths = info.paths if info is not None else None
    score = calculate_score(hops, paths, config)
    return TrustAssessment(hops=hops, paths=paths, score=score, level=get_trust_level(score))


def score_batch(
    batch: Mapping[Identity, Optional[int]],
    config: ScoringConfig = DEFAULT_SCORING,
) -> dict[Identity, float]:
    """Score every target of a batch answer. Batch answers carry no path counts."""
    scores = {target: calculate_score(hops, None, config) for target, hops in batch.items()}
    logger.debug("Scored %d batch targets", len(scores))
    return scores
