"""Tests for oracle response validation."""

import copy

import pytest

from trust_oracle.core.errors import InvalidIdentityError, ResponseValidationError
from trust_oracle.core.models import Identity, ScoringConfig
from trust_oracle.core.validation import (
    is_valid_hops,
    is_valid_paths,
    validate_batch,
    validate_common_follows,
    validate_distance_info,
    validate_follows,
    validate_path,
)

ALICE = "a" * 64
BOB = "0123456789abcdef" * 4
CAROL = "ABCDEF0123456789" * 4


# ── Field predicates ──

@pytest.mark.parametrize("value", [None, 0, 1, 50, 100])
def test_valid_hops(value):
    assert is_valid_hops(value)


@pytest.mark.parametrize("value", [-1, 101, 2.5, 3.0, "3", True, False, [], {}])
def test_invalid_hops(value):
    assert not is_valid_hops(value)


@pytest.mark.parametrize("value", [None, 0, 1, 10_000])
def test_valid_paths(value):
    assert is_valid_paths(value)


@pytest.mark.parametrize("value", [-1, 1.5, "2", True])
def test_invalid_paths(value):
    assert not is_valid_paths(value)


# ── Distance ──

def test_distance_info_returned_unchanged():
    data = {"hops": 2, "paths": 3, "bridges": [ALICE]}
    original = copy.deepcopy(data)
    assert validate_distance_info(data) is data
    assert data == original


def test_distance_info_null_hops_and_absent_paths():
    assert validate_distance_info({"hops": None}) == {"hops": None}


def test_distance_info_rejects_bad_hops():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_distance_info({"hops": 101})
    assert exc_info.value.field == "hops"
    assert exc_info.value.value == 101
    assert "hops" in str(exc_info.value)


def test_distance_info_rejects_negative_paths():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_distance_info({"hops": 2, "paths": -1})
    assert exc_info.value.field == "paths"


@pytest.mark.parametrize("data", [None, [], "hops", 3])
def test_distance_info_requires_object(data):
    with pytest.raises(ResponseValidationError):
        validate_distance_info(data)


# ── Batch ──

def test_batch_returned_unchanged():
    data = {ALICE: 1, BOB: None, CAROL: 100}
    assert validate_batch(data) == {ALICE: 1, BOB: None, CAROL: 100}


def test_batch_empty_is_valid():
    assert validate_batch({}) == {}


def test_batch_rejects_non_hex_key():
    bad_key = "abc" + "z" * 61
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_batch({ALICE: 1, bad_key: 5})
    assert exc_info.value.value == bad_key
    assert bad_key in str(exc_info.value)


def test_batch_rejects_short_key():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_batch({"abc": 5})
    assert "abc" in str(exc_info.value)


def test_batch_rejects_bad_value():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_batch({ALICE: -3})
    assert exc_info.value.field == ALICE
    assert exc_info.value.value == -3


def test_batch_requires_object():
    with pytest.raises(ResponseValidationError):
        validate_batch(None)


# ── Follows ──

def test_follows_returned_unchanged():
    data = {"follows": [BOB, ALICE]}
    assert validate_follows(data) == {"follows": [BOB, ALICE]}


def test_follows_missing_field():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_follows({})
    assert exc_info.value.field == "follows"


def test_follows_not_a_list():
    with pytest.raises(ResponseValidationError):
        validate_follows({"follows": ALICE})


def test_follows_rejects_whole_response_on_one_bad_element():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_follows({"follows": [ALICE, "npub1xyz", BOB]})
    assert exc_info.value.field == "follows[1]"
    assert exc_info.value.value == "npub1xyz"


def test_common_follows():
    assert validate_common_follows({"common": [ALICE]}) == {"common": [ALICE]}
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_common_follows({"follows": [ALICE]})
    assert exc_info.value.field == "common"


# ── Path ──

def test_path_list_and_null():
    assert validate_path({"path": [ALICE, BOB]}) == {"path": [ALICE, BOB]}
    assert validate_path({"path": None}) == {"path": None}
    assert validate_path({}) == {}


def test_path_rejects_bad_element():
    with pytest.raises(ResponseValidationError) as exc_info:
        validate_path({"path": [ALICE, 42]})
    assert exc_info.value.field == "path[1]"


def test_path_rejects_non_list():
    with pytest.raises(ResponseValidationError):
        validate_path({"path": ALICE})


# ── Identity ──

def test_identity_accepts_mixed_case_and_keeps_value():
    identity = Identity(CAROL)
    assert identity == CAROL
    assert isinstance(identity, str)
    assert Identity(identity) is identity


@pytest.mark.parametrize("value", ["", "a" * 63, "a" * 65, "g" * 64, None, 42, " " + "a" * 63])
def test_identity_rejects_malformed(value):
    with pytest.raises(InvalidIdentityError):
        Identity(value)


def test_identity_rejects_trailing_newline():
    with pytest.raises(InvalidIdentityError):
        Identity("a" * 64 + "\n")


# ── Scoring config parsing ──

def test_scoring_config_from_json_dict():
    config = ScoringConfig.from_json_dict({"distanceWeights": {"2": 0.6}, "pathBonus": 0.2, "maxPathBonus": 0.3})
    assert config.distance_weights == {2: 0.6}
    assert config.path_bonus.kind == "scalar"
    assert config.path_bonus.value == 0.2
    assert config.max_path_bonus == 0.3


def test_scoring_config_from_json_dict_defaults():
    config = ScoringConfig.from_json_dict({})
    assert config.distance_weights == {1: 1.0, 2: 0.5, 3: 0.25, 4: 0.1}
    assert config.path_bonus.kind == "per_hop"
    assert config.max_path_bonus == 0.5


def test_scoring_config_rejects_out_of_range_weight():
    with pytest.raises(ValueError):
        ScoringConfig(distance_weights={2: 1.5})
    with pytest.raises(ValueError):
        ScoringConfig(max_path_bonus=2.0)
