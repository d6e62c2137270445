"""
Tests for concurrent analyzer dispatch.
"""
import threading

import pytest

from ..analyzers import SignalAgent, SensationalistLanguageAgent, default_agents
from ..council import AnalyzerCouncil
from ..errors import ConfigurationError
from ..models import AnalyzerName, NormalizedContent, SignalResult

class ExplodingAgent(SignalAgent):
    """Agent that always fails."""
    name = AnalyzerName.SENTIMENT

    def evaluate(self, content):
        raise RuntimeError("lexicon unavailable")

class WrongTypeAgent(SignalAgent):
    name = AnalyzerName.TOPIC

    def evaluate(self, content):
        return {"score": 99}

class BarrierAgent(SignalAgent):
    """Agent that only finishes once every sibling has started."""

    def __init__(self, name: AnalyzerName, barrier: threading.Barrier):
        self.name = name
        self.barrier = barrier

    def evaluate(self, content):
        self.barrier.wait(timeout=5)
        return SignalResult(score=90, has_issue=False, message=self.name.value)

def test_dispatch_returns_every_agent_in_order(council: AnalyzerCouncil):
    results = council.dispatch(NormalizedContent("Officials said the bridge is open again today."))
    assert list(results) == [a.name for a in default_agents()]
    assert all(0 <= r.score <= 100 for r in results.values())

def test_failing_agent_degrades_to_neutral():
    council = AnalyzerCouncil(max_workers=2)
    try:
        council.register_agent(SensationalistLanguageAgent())
        council.register_agent(ExplodingAgent())
        council.register_agent(WrongTypeAgent())
        results = council.dispatch(NormalizedContent("Shocking news today."))
    finally:
        council.shutdown()

    assert results[AnalyzerName.SENSATIONALIST].score == 90
    failed = results[AnalyzerName.SENTIMENT]
    assert failed.score == 50
    assert not failed.has_issue
    assert failed.details["reason"] == "analyzer_error"
    assert "lexicon unavailable" in failed.details["error"]
    assert results[AnalyzerName.TOPIC].details["reason"] == "analyzer_error"

def test_duplicate_registration_rejected():
    council = AnalyzerCouncil(max_workers=1)
    try:
        council.register_agent(SensationalistLanguageAgent())
        with pytest.raises(ConfigurationError):
            council.register_agent(SensationalistLanguageAgent())
        assert council.names == [AnalyzerName.SENSATIONALIST]
    finally:
        council.shutdown()

def test_agents_run_concurrently():
    names = [AnalyzerName.CLICKBAIT, AnalyzerName.BALANCE, AnalyzerName.LENGTH]
    barrier = threading.Barrier(len(names))
    council = AnalyzerCouncil(max_workers=len(names))
    try:
        for name in names:
            council.register_agent(BarrierAgent(name, barrier))
        results = council.dispatch(NormalizedContent("text"))
    finally:
        council.shutdown()
    assert [r.score for r in results.values()] == [90, 90, 90]
