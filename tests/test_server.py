"""Tests for the MCP server tools and environment configuration."""

import json

import httpx
import pytest
import respx

from trust_oracle import server
from trust_oracle.core.models import DEFAULT_SCORING

BASE = "http://oracle.test"
ALICE = "a" * 64
BOB = "b" * 64
CAROL = "c" * 64


@pytest.fixture(autouse=True)
def oracle_env(monkeypatch):
    monkeypatch.setenv("ORACLE_URL", BASE + "/")
    monkeypatch.delenv("ORACLE_TIMEOUT", raising=False)
    monkeypatch.delenv("SCORING_CONFIG", raising=False)


# ── Configuration ──

def test_get_client_from_env(monkeypatch):
    monkeypatch.setenv("ORACLE_TIMEOUT", "5")
    client = server.get_client()
    assert client.base_url == BASE
    assert client.timeout == 5.0


def test_missing_oracle_url(monkeypatch):
    monkeypatch.delenv("ORACLE_URL")
    with pytest.raises(ValueError, match="ORACLE_URL"):
        server.get_client()


def test_default_scoring_config():
    assert server.get_scoring_config() is DEFAULT_SCORING


def test_scoring_config_from_env(monkeypatch):
    monkeypatch.setenv("SCORING_CONFIG", json.dumps({"distanceWeights": {"2": 0.8}, "pathBonus": 0.0}))
    config = server.get_scoring_config()
    assert config.distance_weights == {2: 0.8}
    assert config.path_bonus.value == 0.0


# ── Tools ──

async def test_oracle_trust_score_tool():
    with respx.mock:
        respx.get(f"{BASE}/distance").mock(return_value=httpx.Response(200, json={"hops": 2, "paths": 1}))
        result = await server.oracle_trust_score(ALICE, BOB)

    assert result["score"] == 0.5
    assert result["level"] == "High"
    assert "50%" in result["summary"]


async def test_oracle_trust_score_uses_env_config(monkeypatch):
    monkeypatch.setenv("SCORING_CONFIG", json.dumps({"distanceWeights": {"2": 0.3}}))
    with respx.mock:
        respx.get(f"{BASE}/distance").mock(return_value=httpx.Response(200, json={"hops": 2}))
        result = await server.oracle_trust_score(ALICE, BOB)

    assert result["score"] == 0.3
    assert result["level"] == "Medium"


async def test_oracle_distance_no_path():
    with respx.mock:
        respx.get(f"{BASE}/distance").mock(return_value=httpx.Response(404))
        result = await server.oracle_distance(ALICE, BOB)

    assert result["hops"] is None
    assert result["summary"].startswith("No path")


async def test_oracle_batch_trust_sorted_by_score():
    with respx.mock:
        respx.post(f"{BASE}/distance/batch").mock(
            return_value=httpx.Response(200, json={BOB: 3, CAROL: 1, ALICE: None})
        )
        result = await server.oracle_batch_trust(ALICE, [BOB, CAROL, ALICE])

    assert [r["pubkey"] for r in result["results"]] == [CAROL, BOB, ALICE]
    assert result["results"][0]["level"] == "Very High"
    assert result["summary"].startswith("2 of 3")


async def test_oracle_follows_and_path():
    with respx.mock:
        respx.get(f"{BASE}/follows").mock(return_value=httpx.Response(200, json={"follows": [BOB]}))
        respx.get(f"{BASE}/path").mock(return_value=httpx.Response(200, json={"path": None}))
        follows = await server.oracle_follows(ALICE)
        path = await server.oracle_path(ALICE, CAROL)

    assert follows["follows"] == [BOB]
    assert path["path"] is None


async def test_oracle_health_without_url(monkeypatch):
    monkeypatch.delenv("ORACLE_URL")
    result = await server.oracle_health()
    assert result["healthy"] is False


async def test_oracle_health_unreachable():
    with respx.mock:
        respx.get(f"{BASE}/health").mock(side_effect=httpx.ConnectError("refused"))
        result = await server.oracle_health()

    assert result["healthy"] is False
