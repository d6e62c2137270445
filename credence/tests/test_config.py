"""
Tests for configuration and policy loading.
"""
import json
import os

from .. import credence_config
from ..combinator import ScoreCombinator

def test_default_config_is_valid():
    assert credence_config.validate_config() is None

def test_invalid_threshold_reported(monkeypatch):
    monkeypatch.setattr(credence_config, "NEAR_DUPLICATE_THRESHOLD", 1.5)
    assert "NEAR_DUPLICATE_THRESHOLD" in credence_config.validate_config()

def test_get_config_keys():
    config = credence_config.get_config()
    assert config["max_input_length"] == credence_config.MAX_INPUT_LENGTH
    assert config["weights_backend"] in ("json", "memory")
    assert len(config["verdict_thresholds"]) == 5

def test_policy_file_overrides_thresholds(temp_dir):
    path = os.path.join(temp_dir, "policy.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"thresholds": {"Likely Real": 65}, "satire_verdict": "Satire"}, f)
    policy = credence_config.load_policy(path)
    assert policy["thresholds"]["Likely Real"] == 65
    assert policy["thresholds"]["Uncertain"] == 50

    combinator = ScoreCombinator.from_policy(policy)
    assert combinator.verdicts.classify(66) == "Likely Real"
    assert combinator.satire_verdict == "Satire"

def test_unreadable_policy_keeps_defaults(temp_dir, caplog):
    path = os.path.join(temp_dir, "broken.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("not json")
    policy = credence_config.load_policy(path)
    assert policy["thresholds"]["Likely Real"] == 70
    assert "Failed to load custom policy" in caplog.text
