"""
Credibility analyzers.

Each analyzer is a small stateless agent that inspects a ``NormalizedContent``
and returns one ``SignalResult``. Scores run from 0 to 100 where higher means
more credible; ``has_issue`` is the analyzer's own call on whether the content
is flawed, which is not always the same thing as a low score (missing
citations is an issue even though the score only drops to the midpoint).

All matching is done with literal phrase lookups, token scans over bounded
windows, or regexes without nested quantifiers, so run time stays linear in
the (already truncated) input.
"""
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from nltk.tokenize import RegexpTokenizer

from . import lexicons
from .models import AnalyzerName, NormalizedContent, SignalResult

_WORDS = RegexpTokenizer(r"[A-Za-z']+")
_LETTER_WORDS = RegexpTokenizer(r"[A-Za-z]+")
_SENTENCES = RegexpTokenizer(r"[.!?]+", gaps=True)
_CLAIM_TOKENS = RegexpTokenizer(r"[\w%]+|[^\w\s%]")

_CAPS_RUN = re.compile(r"[A-Z]{5,}")
_PUNCT_RUN = re.compile(r"[!?]{2,}")
_VOWEL_GROUP = re.compile(r"[aeiouy]+")
_PERCENT = re.compile(r"\d+%")
_HAS_CITATION = re.compile(r"\(\d{4}\)|\[[\d,]+\]|cited|source|reference", re.I)

CITATION_PATTERNS = {
    "academic": re.compile(r"doi:|et al\.|[A-Z][a-z]+ & [A-Z][a-z]+, \d{4}|\(\d{4}\)"),
    "news": re.compile(r"(?:reported by|according to) [A-Z][a-z]+(?: [A-Z][a-z]+)*"),
    "quotes": re.compile(r'"[^"]{15,}"'),
    "stats": re.compile(r"(?<!\d)\d+(?:\.\d+)?%|(?<!\d)\d+ (?:out of|of) \d+"),
}

HEADLINE_MAX_CHARS = 100
CLAIM_WINDOW = 10

def _phrase_hits(text_lower: str, phrases: Iterable[str]) -> List[str]:
    return [p for p in phrases if p in text_lower]

def _is_word(token: str) -> bool:
    return token[0].isalnum() or token[0] == "_"

class SignalAgent(ABC):
    """Base class for all analyzers."""

    name: AnalyzerName
    requires_text: bool = True

    def analyze(self, content: NormalizedContent) -> SignalResult:
        """Run the analyzer, falling back to a neutral signal on empty text."""
        if self.requires_text and not content.text.strip():
            return SignalResult.neutral("No text available to analyze", reason="empty_text")
        return self.evaluate(content)

    @abstractmethod
    def evaluate(self, content: NormalizedContent) -> SignalResult:
        """Produce the signal for non-empty content."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name.value!r})"

class SensationalistLanguageAgent(SignalAgent):
    """Flags tabloid phrases such as "you won't believe" or "bombshell"."""

    name = AnalyzerName.SENSATIONALIST

    def __init__(self, phrases: Sequence[str] = lexicons.SENSATIONALIST_PHRASES):
        self.phrases = tuple(p.lower() for p in phrases)

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        matches = _phrase_hits(content.text.lower(), self.phrases)
        score = max(30, 100 - len(matches) * 10) if matches else 100
        return SignalResult(
            score=score,
            has_issue=bool(matches),
            message=(f"Contains {len(matches)} sensationalist phrases that may indicate clickbait"
                     if matches else "No obvious sensationalist language detected"),
            details={"matches": matches},
        )

class ClickbaitHeadlineAgent(SignalAgent):
    """Looks for clickbait constructions in the headline.

    The headline is the text up to the first period, capped at 100 characters.
    Matching groups: numbered listicles ("7 ways ..."), teasers, "one trick"
    hooks and reveal bait. Each group counts at most once.
    """

    name = AnalyzerName.CLICKBAIT

    @staticmethod
    def headline(text: str) -> str:
        stop = text.find(".")
        end = stop if stop > 0 else HEADLINE_MAX_CHARS
        return text[:min(HEADLINE_MAX_CHARS, end)]

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        headline = self.headline(content.text)
        lowered = headline.lower()
        matches = []

        words = lowered.split()
        if len(words) >= 2 and words[0].isdigit() and words[1] in lexicons.CLICKBAIT_LISTICLE_NOUNS:
            matches.append("listicle")
        for group, phrases in lexicons.CLICKBAIT_PHRASE_GROUPS.items():
            if _phrase_hits(lowered, phrases):
                matches.append(group)

        score = max(40, 100 - len(matches) * 20) if matches else 100
        return SignalResult(
            score=score,
            has_issue=bool(matches),
            message=("Contains clickbait headline patterns"
                     if matches else "No obvious clickbait patterns detected"),
            details={"headline": headline, "matches": matches},
        )

class FactualLanguageAgent(SignalAgent):
    """Rewards reporting language ("according to", "data from", ...)."""

    name = AnalyzerName.FACTUAL_LANGUAGE

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        matches = _phrase_hits(content.text.lower(), lexicons.FACTUAL_PHRASES)
        score = min(100, 80 + len(matches) * 5) if matches else 80
        return SignalResult(
            score=score,
            has_issue=not matches,
            message=(f"Contains {len(matches)} indicators of factual reporting"
                     if matches else "Few or no explicit indicators of factual reporting"),
            details={"matches": matches},
        )

class TextFormattingAgent(SignalAgent):
    """Counts ALL-CAPS runs and repeated !/? used for emotional emphasis."""

    name = AnalyzerName.TEXT_FORMATTING

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        caps = len(_CAPS_RUN.findall(content.text))
        punct = len(_PUNCT_RUN.findall(content.text))
        flagged = caps > 0 or punct > 0
        return SignalResult(
            score=max(50, 100 - caps * 5 - punct * 5),
            has_issue=flagged,
            message=("Contains formatting often used for emotional manipulation (ALL CAPS, excessive punctuation)"
                     if flagged else "Text formatting appears normal"),
            details={"caps_segments": caps, "excessive_punctuation": punct},
        )

class PerspectiveBalanceAgent(SignalAgent):
    name = AnalyzerName.BALANCE

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        lowered = content.text.lower()
        balanced = _phrase_hits(lowered, lexicons.BALANCED_PHRASES)
        onesided = _phrase_hits(lowered, lexicons.ONESIDED_PHRASES)

        score = 80
        if len(balanced) > 1:
            score += min(15, len(balanced) * 5)
        if len(onesided) > 1:
            score -= min(20, len(onesided) * 4)

        if balanced:
            message = "Content shows some balance in perspectives"
        elif len(onesided) > 2:
            message = "Content presents a one-sided perspective"
        else:
            message = "Unable to determine balance of perspectives"

        return SignalResult(
            score=score,
            has_issue=not balanced and len(onesided) > 2,
            message=message,
            details={"balanced_terms": balanced, "onesided_terms": onesided},
        )

class DomainReputationAgent(SignalAgent):
    """Scores the source host against reliable, unreliable and satire lists.

    Matching is substring containment so subdomains and mobile hosts
    (``m.bbc.co.uk``) resolve to their parent outlet. Satire is checked first.
    """

    name = AnalyzerName.DOMAIN
    requires_text = False

    RELIABLE = "Generally reliable"
    UNRELIABLE = "Potentially unreliable"
    SATIRE = "Satire"
    UNKNOWN = "Unknown"

    def __init__(self,
                 reliable: Sequence[str] = lexicons.RELIABLE_DOMAINS,
                 unreliable: Sequence[str] = lexicons.UNRELIABLE_DOMAINS,
                 satire: Sequence[str] = lexicons.SATIRE_DOMAINS,
                 unknown_score: float = 70.0):
        self.reliable = tuple(d.lower() for d in reliable)
        self.unreliable = tuple(d.lower() for d in unreliable)
        self.satire = tuple(d.lower() for d in satire)
        self.unknown_score = unknown_score

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        domain = (content.source_domain or "").strip().lower()
        if not domain:
            return SignalResult(
                score=self.unknown_score,
                has_issue=False,
                message="No URL provided for domain analysis",
                details={"domain": None, "reputation": self.UNKNOWN},
            )

        if any(d in domain for d in self.satire):
            return SignalResult(
                score=30,
                has_issue=True,
                message="This appears to be a satirical website, not meant to be taken as factual news",
                details={"domain": domain, "reputation": self.SATIRE},
            )
        if any(d in domain for d in self.reliable):
            return SignalResult(
                score=95,
                has_issue=False,
                message="Content comes from a generally reliable source",
                details={"domain": domain, "reputation": self.RELIABLE},
            )
        if any(d in domain for d in self.unreliable):
            return SignalResult(
                score=20,
                has_issue=True,
                message="Content comes from a source with a history of misinformation",
                details={"domain": domain, "reputation": self.UNRELIABLE},
            )
        return SignalResult(
            score=self.unknown_score,
            has_issue=False,
            message="Source reputation unknown",
            details={"domain": domain, "reputation": self.UNKNOWN},
        )

class ContentLengthAgent(SignalAgent):
    name = AnalyzerName.LENGTH

    # (exclusive upper word bound, score, message)
    BANDS: Tuple[Tuple[Optional[int], int, str], ...] = (
        (100, 40, "Content is very short, which can lack context and detail"),
        (300, 60, "Content is relatively brief"),
        (800, 75, "Content has reasonable length for covering a topic"),
        (None, 80, "Content is detailed and substantive in length"),
    )

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        word_count = len(content.text.split())
        for bound, score, message in self.BANDS:
            if bound is None or word_count < bound:
                break
        return SignalResult(
            score=score,
            has_issue=word_count < 200,
            message=message,
            details={"word_count": word_count},
        )

class SentimentIntensityAgent(SignalAgent):
    """Lexicon sentiment. Heavy emotional wording is treated as manipulative."""

    name = AnalyzerName.SENTIMENT

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        words = [w.lower() for w in _WORDS.tokenize(content.text)]
        if not words:
            return SignalResult.neutral("No words available for sentiment analysis", reason="no_words")
        positive = sum(1 for w in words if w in lexicons.POSITIVE_WORDS)
        negative = sum(1 for w in words if w in lexicons.NEGATIVE_WORDS)

        scale = max(1.0, len(words) * 0.05)
        sentiment = (positive - negative) / scale
        intensity = (positive + negative) / scale
        emotional = intensity > 0.2

        return SignalResult(
            score=50 + sentiment * 5,
            has_issue=emotional,
            message=("Content has high emotional language that may be used to manipulate"
                     if emotional else "Content uses relatively neutral emotional language"),
            details={
                "sentiment_score": round(sentiment, 4),
                "emotional_intensity": round(intensity, 4),
                "positive_count": positive,
                "negative_count": negative,
            },
        )

def count_syllables(word: str) -> int:
    """Rough English syllable count: vowel groups, minus a silent final e."""
    word = word.lower()
    groups = len(_VOWEL_GROUP.findall(word))
    if groups > 1 and word.endswith("e") and not word.endswith(("le", "ee", "ye")):
        groups -= 1
    return max(1, groups)

class ReadabilityAgent(SignalAgent):
    """Flesch-Kincaid grade level."""

    name = AnalyzerName.READABILITY

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        sentences = [s for s in _SENTENCES.tokenize(content.text) if s.strip()]
        words = _LETTER_WORDS.tokenize(content.text)
        if not sentences or not words:
            return SignalResult.neutral("Not enough sentences to estimate readability", reason="no_sentences")

        syllables = sum(count_syllables(w) for w in words)
        grade = 0.39 * (len(words) / len(sentences)) + 11.8 * (syllables / len(words)) - 15.59

        if grade > 12:
            score = 60
        elif grade < 6:
            score = 70
        else:
            score = 90

        if grade > 15:
            message = "Content uses unnecessarily complex language, which can obscure meaning"
        elif grade < 5:
            message = "Content uses very simple language, which may oversimplify complex topics"
        else:
            message = "Content has appropriate readability level"

        return SignalResult(
            score=score,
            has_issue=grade > 15 or grade < 5,
            message=message,
            details={
                "grade_level": round(grade, 2),
                "sentences": len(sentences),
                "words": len(words),
                "syllables": syllables,
            },
        )

class TopicRelevanceAgent(SignalAgent):
    """Informational only: reports which topic buckets the text touches."""

    name = AnalyzerName.TOPIC

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        lowered = content.text.lower()
        topic_matches = {
            topic: len(_phrase_hits(lowered, keywords))
            for topic, keywords in lexicons.TOPIC_KEYWORDS.items()
        }
        ranked = [t for t, n in sorted(topic_matches.items(), key=lambda kv: -kv[1]) if n > 0]
        return SignalResult(
            score=70,
            has_issue=False,
            message=(f"Content primarily discusses: {', '.join(ranked[:2])}"
                     if ranked else "Unable to determine main topics"),
            details={"topics": ranked, "topic_matches": topic_matches},
        )

class PoliticalBiasAgent(SignalAgent):
    name = AnalyzerName.POLITICAL_BIAS

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        lowered = content.text.lower()
        left = len(_phrase_hits(lowered, lexicons.LEFT_LEANING_TERMS))
        right = len(_phrase_hits(lowered, lexicons.RIGHT_LEANING_TERMS))
        total = left + right
        # -100 is fully left, +100 fully right
        bias = 0.0 if total == 0 else (right - left) / total * 100
        slanted = abs(bias) > 50

        if abs(bias) < 20:
            message = "Content appears politically balanced"
        elif bias < 0:
            message = f"Content appears to lean left politically ({abs(round(bias))}% bias level)"
        else:
            message = f"Content appears to lean right politically ({round(bias)}% bias level)"

        return SignalResult(
            score=60 if slanted else 85,
            has_issue=slanted,
            message=message,
            details={"bias_score": round(bias), "left_terms": left, "right_terms": right},
        )

def find_claims(text: str) -> List[str]:
    """Extract claim-like windows with a single left-to-right token scan.

    Recognised shapes, each needing at least two words after the trigger:
    "X Y is/are/was/were Z W", "according to ...", "studies show/indicate/suggest ..."
    and "N% of ...". Punctuation ends a window.
    """
    tokens = _CLAIM_TOKENS.tokenize(text)
    n = len(tokens)
    claims: List[str] = []
    floor = 0  # tokens before this index already belong to a claim
    i = 0

    def run_after(start: int) -> int:
        end = start
        while end < n and end - start < CLAIM_WINDOW and _is_word(tokens[end]):
            end += 1
        return end

    while i < n:
        tok = tokens[i].lower()
        nxt = tokens[i + 1].lower() if i + 1 < n else ""
        trigger = (
            (tok == "according" and nxt == "to")
            or (tok == "studies" and nxt in lexicons.CLAIM_STUDY_VERBS)
            or (_PERCENT.fullmatch(tok) is not None and nxt == "of")
        )
        if trigger:
            end = run_after(i + 2)
            if end - (i + 2) >= 2:
                claims.append(" ".join(tokens[i:end]))
                floor = i = end
                continue
        elif tok in lexicons.CLAIM_COPULAS:
            start = i
            while start > floor and i - start < CLAIM_WINDOW and _is_word(tokens[start - 1]):
                start -= 1
            end = run_after(i + 1)
            if i - start >= 2 and end - (i + 1) >= 2:
                claims.append(" ".join(tokens[start:end]))
                floor = i = end
                continue
        i += 1
    return claims

class FactualClaimsAgent(SignalAgent):
    """Penalises many unsupported factual claims."""

    name = AnalyzerName.FACTUAL_CLAIMS

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        claims = find_claims(content.text)
        has_citations = _HAS_CITATION.search(content.text) is not None

        if claims and not has_citations:
            score = 50
        elif claims:
            score = 80
        else:
            score = 70

        unsupported = len(claims) > 2 and not has_citations
        if unsupported:
            message = "Contains multiple factual claims without citations or evidence"
        elif claims and has_citations:
            message = "Contains factual claims with some form of citation"
        else:
            message = "Few specific factual claims detected"

        return SignalResult(
            score=score,
            has_issue=unsupported,
            message=message,
            details={
                "claims_count": len(claims),
                "has_citations": has_citations,
                "examples": claims[:3],
            },
        )

class SourceCitationsAgent(SignalAgent):
    """Counts academic references, attributed reporting, long quotes and statistics."""

    name = AnalyzerName.SOURCE_CITATIONS

    def evaluate(self, content: NormalizedContent) -> SignalResult:
        citations: Dict[str, List[str]] = {
            kind: pattern.findall(content.text) for kind, pattern in CITATION_PATTERNS.items()
        }
        total = sum(len(found) for found in citations.values())
        return SignalResult(
            score=50 if total == 0 else min(100, 60 + total * 5),
            has_issue=total == 0,
            message=("No clear citations or evidence found" if total == 0
                     else f"Content includes {total} citations or pieces of evidence"),
            details=citations,
        )

DEFAULT_AGENT_CLASSES = (
    SensationalistLanguageAgent,
    ClickbaitHeadlineAgent,
    FactualLanguageAgent,
    TextFormattingAgent,
    PerspectiveBalanceAgent,
    DomainReputationAgent,
    ContentLengthAgent,
    SentimentIntensityAgent,
    ReadabilityAgent,
    TopicRelevanceAgent,
    PoliticalBiasAgent,
    FactualClaimsAgent,
    SourceCitationsAgent,
)

def default_agents() -> List[SignalAgent]:
    """Fresh instances of every built-in analyzer, in reporting order."""
    return [cls() for cls in DEFAULT_AGENT_CLASSES]
