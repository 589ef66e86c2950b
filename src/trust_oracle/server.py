"""Trust Oracle MCP Server.

FastMCP server with 8 read-only tools over a remote distance oracle.
Run: trust-oracle-mcp
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .core.clients.oracle import DEFAULT_TIMEOUT, OracleClient
from .core.models import DEFAULT_SCORING, ScoringConfig
from .core.scoring import get_trust_level, score_batch

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and report the oracle address."""
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("Trust oracle server starting (oracle: %s)", os.environ.get("ORACLE_URL", "<unset>"))
    yield
    logger.info("Trust oracle server stopped")


mcp = FastMCP(
    "Trust Oracle",
    instructions="Ask your AI how close two pubkeys are in the social graph and how much to trust them. Distances, follows and paths come from a remote distance oracle.",
    lifespan=lifespan,
)


def _get_oracle_url() -> str:
    url = os.environ.get("ORACLE_URL", "")
    if not url:
        raise ValueError("ORACLE_URL environment variable is required, e.g. ORACLE_URL=http://localhost:3000")
    return url


def _get_timeout() -> float:
    return float(os.environ.get("ORACLE_TIMEOUT", str(DEFAULT_TIMEOUT)))


def get_client() -> OracleClient:
    """Build an oracle client from the environment."""
    return OracleClient(_get_oracle_url(), timeout=_get_timeout())


def get_scoring_config() -> ScoringConfig:
    """Scoring weights from SCORING_CONFIG (camelCase JSON), or the defaults."""
    raw = os.environ.get("SCORING_CONFIG", "")
    if not raw:
        return DEFAULT_SCORING
    return ScoringConfig.from_json_dict(json.loads(raw))


def _short(pubkey: str) -> str:
    return f"{pubkey[:8]}…" if len(pubkey) > 12 else pubkey


# ─── Tool 1: Distance ────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_distance(from_pubkey: str, to_pubkey: str) -> dict:
    """Hop distance and shortest-path count between two pubkeys.

    Args:
        from_pubkey: 64-character hex pubkey of the observer.
        to_pubkey: 64-character hex pubkey of the target.
    """
    info = await get_client().get_distance_info(from_pubkey, to_pubkey)
    if info is None or info.hops is None:
        summary = f"No path from {_short(from_pubkey)} to {_short(to_pubkey)}."
        return {"title": "Distance", "hops": None, "paths": None, "summary": summary}

    summary = f"{_short(to_pubkey)} is {info.hops} hop(s) from {_short(from_pubkey)}"
    if info.paths is not None:
        summary += f" via {info.paths} shortest path(s)"
    return {
        "title": "Distance",
        "hops": info.hops,
        "paths": info.paths,
        "details": info.model_dump(),
        "summary": summary + ".",
    }


# ─── Tool 2: Trust Score ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_trust_score(from_pubkey: str, to_pubkey: str) -> dict:
    """Trust score (0-1) and level for a target as seen from an observer.

    Combines hop distance with a bonus for multiple independent shortest paths.

    Args:
        from_pubkey: 64-character hex pubkey of the observer.
        to_pubkey: 64-character hex pubkey of the target.
    """
    assessment = await get_client().get_trust(from_pubkey, to_pubkey, get_scoring_config())
    return {
        "title": "Trust Score",
        **assessment.model_dump(mode="json"),
        "summary": f"Trust in {_short(to_pubkey)}: {assessment.score:.0%} ({assessment.level.value}).",
    }


# ─── Tool 3: Batch Trust ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_batch_trust(from_pubkey: str, targets: list[str]) -> dict:
    """Hop distance and trust score for many targets in one oracle request.

    Batch answers carry no path counts, so scores use distance only.

    Args:
        from_pubkey: 64-character hex pubkey of the observer.
        targets: List of 64-character hex pubkeys.
    """
    batch = await get_client().get_distance_batch(from_pubkey, targets)
    scores = score_batch(batch, get_scoring_config())
    results = [
        {"pubkey": str(pubkey), "hops": batch[pubkey], "score": score, "level": get_trust_level(score).value}
        for pubkey, score in sorted(scores.items(), key=lambda item: item[1], reverse=True)
    ]
    reachable = sum(1 for r in results if r["hops"] is not None)
    return {
        "title": "Batch Trust",
        "results": results,
        "summary": f"{reachable} of {len(results)} target(s) reachable from {_short(from_pubkey)}.",
    }


# ─── Tool 4: Follows ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_follows(pubkey: str) -> dict:
    """Pubkeys followed by a pubkey.

    Args:
        pubkey: 64-character hex pubkey.
    """
    follows = await get_client().get_follows(pubkey)
    return {
        "title": "Follows",
        "pubkey": pubkey,
        "follows": [str(p) for p in follows],
        "summary": f"{_short(pubkey)} follows {len(follows)} pubkey(s).",
    }


# ─── Tool 5: Common Follows ──────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_common_follows(from_pubkey: str, to_pubkey: str) -> dict:
    """Pubkeys followed by both of two pubkeys.

    Args:
        from_pubkey: 64-character hex pubkey.
        to_pubkey: 64-character hex pubkey.
    """
    common = await get_client().get_common_follows(from_pubkey, to_pubkey)
    return {
        "title": "Common Follows",
        "common": [str(p) for p in common],
        "summary": f"{len(common)} follow(s) in common.",
    }


# ─── Tool 6: Path ────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_path(from_pubkey: str, to_pubkey: str) -> dict:
    """One concrete shortest path between two pubkeys.

    Args:
        from_pubkey: 64-character hex pubkey of the start.
        to_pubkey: 64-character hex pubkey of the end.
    """
    path = await get_client().get_path(from_pubkey, to_pubkey)
    if path is None:
        return {"title": "Path", "path": None, "summary": "No path found."}
    return {
        "title": "Path",
        "path": [str(p) for p in path],
        "summary": " → ".join(_short(p) for p in path),
    }


# ─── Tool 7: Stats ───────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_stats() -> dict:
    """Graph statistics reported by the oracle, returned as-is."""
    stats = await get_client().get_stats()
    return {"title": "Oracle Stats", "stats": stats}


# ─── Tool 8: Health ──────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def oracle_health() -> dict:
    """Whether the oracle is reachable and healthy. Never fails."""
    try:
        client = get_client()
    except ValueError as exc:
        return {"title": "Oracle Health", "healthy": False, "summary": str(exc)}
    healthy = await client.is_healthy()
    return {
        "title": "Oracle Health",
        "healthy": healthy,
        "summary": f"Oracle at {client.base_url} is {'healthy' if healthy else 'unreachable or unhealthy'}.",
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
