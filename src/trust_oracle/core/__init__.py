"""Core business logic — oracle client, response validation, scoring, and data models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework.
"""

from .clients.oracle import OracleClient
from .errors import (
    InvalidIdentityError,
    OracleClientError,
    OracleError,
    OracleTransportError,
    ResponseValidationError,
)
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
from .scoring import assess, calculate_score, get_trust_level, score_batch
