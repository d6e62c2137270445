"""
Tests for the weight store and its persistence backends.
"""
import json
import math
import os

import pytest

from ..errors import ConfigurationError, PersistenceUnavailable
from ..models import AnalyzerName
from ..persistence import (
    JsonWeightPersistence,
    MemoryWeightPersistence,
    WeightPersistence,
    create_weight_persistence,
)
from ..weights import DEFAULT_WEIGHTS, WeightStore, validate_profile

A = AnalyzerName

class BrokenPersistence(WeightPersistence):
    """Backend whose storage is always unavailable."""

    def load_weights(self):
        raise PersistenceUnavailable("disk gone")

    def save_weights(self, weights):
        raise PersistenceUnavailable("disk gone")

    def clear(self):
        raise PersistenceUnavailable("disk gone")

def boosted_profile():
    profile = {name.value: weight for name, weight in DEFAULT_WEIGHTS.items()}
    profile[A.SENSATIONALIST.value] = 7.5
    return profile

def test_store_starts_with_defaults(store):
    assert dict(store.get()) == DEFAULT_WEIGHTS
    assert store.total() == pytest.approx(math.fsum(DEFAULT_WEIGHTS.values()))

def test_snapshot_is_read_only(store):
    snapshot = store.get()
    with pytest.raises(TypeError):
        snapshot[A.SENSATIONALIST] = 5.0

def test_commit_persists_and_swaps(store, memory_persistence):
    store.commit(boosted_profile())
    assert store.get()[A.SENSATIONALIST] == 7.5
    assert memory_persistence.saves == 1
    assert memory_persistence.load_weights()[A.SENSATIONALIST.value] == 7.5

@pytest.mark.parametrize("bad", [
    {A.SENSATIONALIST.value: -1.0},
    {A.SENSATIONALIST.value: 0.0},
    {A.SENSATIONALIST.value: "heavy"},
    {"bogus": 1.0},
])
def test_commit_rejects_invalid_profiles(store, bad):
    profile = {**boosted_profile(), **bad}
    with pytest.raises(ConfigurationError):
        store.commit(profile)
    assert dict(store.get()) == DEFAULT_WEIGHTS

def test_commit_rejects_partial_profile(store):
    with pytest.raises(ConfigurationError):
        store.commit({A.SENSATIONALIST: 1.0})

def test_store_loads_persisted_profile():
    store = WeightStore(persistence=MemoryWeightPersistence(boosted_profile()))
    assert store.get()[A.SENSATIONALIST] == 7.5

def test_store_rejects_incomplete_persisted_profile():
    store = WeightStore(persistence=MemoryWeightPersistence({A.SENSATIONALIST.value: 3.0}))
    assert dict(store.get()) == DEFAULT_WEIGHTS

def test_store_survives_broken_persistence():
    store = WeightStore(persistence=BrokenPersistence())
    assert dict(store.get()) == DEFAULT_WEIGHTS
    store.commit(boosted_profile())
    assert store.get()[A.SENSATIONALIST] == 7.5
    store.reset()
    assert dict(store.get()) == DEFAULT_WEIGHTS

def test_reset_clears_persisted_override(store, memory_persistence):
    store.commit(boosted_profile())
    store.reset()
    assert dict(store.get()) == DEFAULT_WEIGHTS
    assert memory_persistence.load_weights() is None

def test_transaction_yields_snapshot(store):
    with store.transaction() as current:
        store.commit({name: w * 2 for name, w in current.items()})
    assert store.total() == pytest.approx(2 * math.fsum(DEFAULT_WEIGHTS.values()))

def test_validate_profile_accepts_string_keys():
    validated = validate_profile({"fact-check": "2.5"})
    assert validated == {A.FACT_CHECK: 2.5}

def test_json_persistence_roundtrip(temp_dir):
    path = os.path.join(temp_dir, "nested", "weights.json")
    backend = JsonWeightPersistence(path)
    assert backend.load_weights() is None
    backend.save_weights({"sensationalist-language": 1.25})
    assert backend.load_weights() == {"sensationalist-language": 1.25}
    backend.clear()
    assert backend.load_weights() is None

def test_json_persistence_detects_tampering(temp_dir):
    path = os.path.join(temp_dir, "weights.json")
    JsonWeightPersistence(path).save_weights(boosted_profile())
    with open(path, "r", encoding="utf-8") as f:
        record = json.load(f)
    record["weights"]["domain-reputation"] = 50.0
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record, f)

    with pytest.raises(PersistenceUnavailable):
        JsonWeightPersistence(path).load_weights()
    store = WeightStore(persistence=JsonWeightPersistence(path))
    assert dict(store.get()) == DEFAULT_WEIGHTS

def test_json_persistence_corrupt_file(temp_dir):
    path = os.path.join(temp_dir, "weights.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("{not json")
    with pytest.raises(PersistenceUnavailable):
        JsonWeightPersistence(path).load_weights()

def test_store_reloads_across_instances(temp_dir):
    path = os.path.join(temp_dir, "weights.json")
    WeightStore(persistence=JsonWeightPersistence(path)).commit(boosted_profile())
    reloaded = WeightStore(persistence=JsonWeightPersistence(path))
    assert reloaded.get()[A.SENSATIONALIST] == 7.5

def test_create_weight_persistence(temp_dir):
    assert isinstance(create_weight_persistence("memory"), MemoryWeightPersistence)
    backend = create_weight_persistence("json", path=os.path.join(temp_dir, "w.json"))
    assert isinstance(backend, JsonWeightPersistence)
    with pytest.raises(ValueError):
        create_weight_persistence("redis")
