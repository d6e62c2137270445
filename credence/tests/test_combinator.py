"""
Tests for weighted combination and verdict classification.
"""
import pytest

from ..analyzers import DomainReputationAgent
from ..combinator import ScoreCombinator, VerdictTable, failure_result, round_half_up
from ..errors import ConfigurationError
from ..models import AnalyzerName, SignalResult

A = AnalyzerName

def sig(score, issue=False, message=None, **details):
    return SignalResult(score=score, has_issue=issue, message=message or f"signal {score}", details=details)

@pytest.fixture
def combinator() -> ScoreCombinator:
    return ScoreCombinator(verdicts=VerdictTable())

def test_equal_weights_mean(combinator):
    result = combinator.combine(
        {A.SENSATIONALIST: sig(100), A.CLICKBAIT: sig(40)}, None,
        {A.SENSATIONALIST: 1.0, A.CLICKBAIT: 1.0})
    assert result.score == 70
    assert result.verdict == "Likely Real"

def test_weights_shift_the_mean(combinator):
    result = combinator.combine(
        {A.SENSATIONALIST: sig(100), A.CLICKBAIT: sig(40)}, None,
        {A.SENSATIONALIST: 3.0, A.CLICKBAIT: 1.0})
    assert result.score == 85
    assert result.verdict == "Very Likely Real"

def test_half_rounds_up(combinator):
    result = combinator.combine(
        {A.SENSATIONALIST: sig(84), A.CLICKBAIT: sig(85)}, None,
        {A.SENSATIONALIST: 1.0, A.CLICKBAIT: 1.0})
    assert result.score == 85
    assert round_half_up(49.5) == 50
    assert round_half_up(49.49) == 49

def test_similarity_participates_only_when_present(combinator):
    weights = {A.SENSATIONALIST: 1.0, A.HISTORY_SIMILARITY: 1.0}
    without = combinator.combine({A.SENSATIONALIST: sig(100)}, None, weights)
    with_history = combinator.combine({A.SENSATIONALIST: sig(100)}, sig(30), weights)
    assert without.score == 100
    assert with_history.score == 65
    assert A.HISTORY_SIMILARITY in with_history.signals

def test_string_keys_are_accepted(combinator):
    result = combinator.combine({"sensationalist-language": sig(60)}, None, {A.SENSATIONALIST: 1.0})
    assert result.score == 60
    assert list(result.signals) == [A.SENSATIONALIST]

@pytest.mark.parametrize("signals,weights", [
    ({A.SENSATIONALIST: sig(50)}, {}),
    ({A.SENSATIONALIST: sig(50)}, {A.SENSATIONALIST: 0.0}),
    ({A.SENSATIONALIST: sig(50)}, {A.SENSATIONALIST: -1.0}),
    ({"no-such-analyzer": sig(50)}, {A.SENSATIONALIST: 1.0}),
    ({}, {A.SENSATIONALIST: 1.0}),
])
def test_configuration_errors_raise(combinator, signals, weights):
    with pytest.raises(ConfigurationError):
        combinator.combine(signals, None, weights)

@pytest.mark.parametrize("score,verdict", [
    (100, "Very Likely Real"),
    (85, "Very Likely Real"),
    (84, "Likely Real"),
    (70, "Likely Real"),
    (69, "Uncertain"),
    (50, "Uncertain"),
    (49, "Potentially Misleading"),
    (30, "Potentially Misleading"),
    (29, "Likely Fake"),
    (0, "Likely Fake"),
])
def test_verdict_thresholds(score, verdict):
    assert VerdictTable().classify(score) == verdict

def test_verdict_table_must_reach_zero():
    with pytest.raises(ConfigurationError):
        VerdictTable([(50, "Fine"), (10, "Bad")])
    with pytest.raises(ConfigurationError):
        VerdictTable([])

def test_verdict_table_from_policy():
    table = VerdictTable.from_policy({"thresholds": {"Good": 60, "Bad": 0}})
    assert table.classify(60) == "Good"
    assert table.classify(59) == "Bad"

def test_satire_overrides_verdict(combinator):
    satire = sig(30, True, "satire", reputation=DomainReputationAgent.SATIRE)
    result = combinator.combine(
        {A.SENSATIONALIST: sig(100), A.DOMAIN: satire}, None,
        {A.SENSATIONALIST: 10.0, A.DOMAIN: 1.0})
    assert result.score >= 85
    assert result.verdict == "Satirical Content"

def test_issues_and_insights_follow_analyzer_order(combinator):
    signals = {
        A.SOURCE_CITATIONS: sig(50, True, "no citations"),
        A.SENSATIONALIST: sig(60, True, "sensational"),
        A.FACTUAL_LANGUAGE: sig(90, False, "factual"),
        A.TOPIC: sig(70, False, "topic"),
    }
    weights = {name: 1.0 for name in signals}
    result = combinator.combine(signals, None, weights)
    assert result.issues == ("sensational", "no citations")
    assert result.insights == ("factual", "topic")

def test_unknown_domain_is_not_an_insight(combinator):
    weights = {A.DOMAIN: 1.0, A.TOPIC: 1.0}
    unknown = combinator.combine(
        {A.DOMAIN: sig(70, message="unknown", reputation=DomainReputationAgent.UNKNOWN),
         A.TOPIC: sig(70, message="topic")}, None, weights)
    assert unknown.insights == ("topic",)
    reliable = combinator.combine(
        {A.DOMAIN: sig(95, message="reliable", reputation=DomainReputationAgent.RELIABLE),
         A.TOPIC: sig(70, message="topic")}, None, weights)
    assert reliable.insights == ("reliable", "topic")

def test_result_is_immutable(combinator):
    result = combinator.combine({A.SENSATIONALIST: sig(80)}, None, {A.SENSATIONALIST: 1.0})
    with pytest.raises(TypeError):
        result.signals[A.CLICKBAIT] = sig(1)
    assert result.to_dict()["signals"]["sensationalist-language"]["score"] == 80

def test_failure_result():
    result = failure_result("No content provided for analysis")
    assert result.failed
    assert result.score == 0
    assert result.verdict == "Analysis Failed"
    assert result.issues == ("No content provided for analysis",)
