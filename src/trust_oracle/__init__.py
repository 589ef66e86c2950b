"""Trust Oracle MCP Server.

Ask your AI how far apart two people are in a social graph, and how much
one should trust the other. Scores come from a remote distance oracle.
"""

__version__ = "0.1.0"

from .core import (
    DEFAULT_SCORING,
    DistanceInfo,
    Identity,
    OracleClient,
    ScoringConfig,
    TrustLevel,
    calculate_score,
    get_trust_level,
)
