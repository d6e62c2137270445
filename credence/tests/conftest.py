"""
Shared pytest fixtures for Credence test suite.
"""
import pytest
import tempfile
from typing import Generator

from ..council import AnalyzerCouncil, build_default_council
from ..engine import CredibilityEngine
from ..persistence import MemoryWeightPersistence
from ..weights import WeightStore

@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Provide temporary directory for test data."""
    with tempfile.TemporaryDirectory() as td:
        yield td

@pytest.fixture
def memory_persistence() -> MemoryWeightPersistence:
    """Provide empty in-memory weight persistence."""
    return MemoryWeightPersistence()

@pytest.fixture
def store(memory_persistence: MemoryWeightPersistence) -> WeightStore:
    """Provide weight store with default weights."""
    return WeightStore(persistence=memory_persistence)

@pytest.fixture
def council() -> Generator[AnalyzerCouncil, None, None]:
    """Provide council with every built-in analyzer."""
    c = build_default_council(max_workers=4)
    yield c
    c.shutdown()

@pytest.fixture
def engine(memory_persistence: MemoryWeightPersistence) -> Generator[CredibilityEngine, None, None]:
    """Provide fresh engine with empty history and default weights."""
    eng = CredibilityEngine(persistence=memory_persistence)
    yield eng
    eng.shutdown()

@pytest.fixture
def sensational_text() -> str:
    """Provide heavily sensational sample text."""
    return (
        "SHOCKING BOMBSHELL: You won't believe what they don't want you to know!!! "
        "Wake up, the mainstream media won't tell you the secret. "
        "This is clearly, obviously, absolutely a terrible disaster and a catastrophic failure."
    )

@pytest.fixture
def measured_text() -> str:
    """Provide sober wire-style sample text."""
    return (
        "The city council approved the transit budget on Tuesday. "
        "According to data from the finance office, the plan adds twelve bus routes. "
        "However, critics say the fare increase will hurt commuters, while some "
        "residents welcomed the longer service hours. "
        "\"We expect ridership to grow steadily over the next year,\" the transit director said."
    )
