# lexicons.py
# Static phrase and domain lists consulted by the analyzers.
# Everything here is lower-case and matched by plain substring or token lookup.

SENSATIONALIST_PHRASES = (
    "you won't believe", "shocking", "mind-blowing", "outrageous",
    "unbelievable", "jaw-dropping", "sensational", "incredible",
    "insane", "unreal", "bombshell", "breaking", "explosive",
    "conspiracy", "secret", "they don't want you to know", "wake up",
    "mainstream media won't tell you", "they're hiding", "government doesn't want you",
)

# Each group counts once no matter how many of its phrases hit the headline.
CLICKBAIT_PHRASE_GROUPS = {
    "teaser": ("what happens next", "you won't believe", "wait until you see"),
    "trick": ("how to", "this one trick", "doctors hate"),
    "reveal": ("secrets", "revealed", "shocking truth", "mind-blown", "mindblown"),
}
CLICKBAIT_LISTICLE_NOUNS = frozenset({
    "ways", "things", "reasons", "facts", "tips", "tricks", "ideas", "steps",
})

FACTUAL_PHRASES = (
    "according to", "study shows", "research indicates", "evidence suggests",
    "data from", "analysis of", "survey of", "reported by", "conducted by",
)

BALANCED_PHRASES = (
    "however", "on the other hand", "critics say", "while some",
    "others argue", "alternatively", "both sides", "different perspective",
)

ONESIDED_PHRASES = (
    "clearly", "obviously", "undoubtedly", "without question",
    "absolutely", "certainly", "definitely", "unquestionably", "only one conclusion",
)

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "positive", "benefit", "happy",
    "wonderful", "fantastic", "amazing", "successful", "win",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "negative", "poor", "failure",
    "horrible", "disappointing", "wrong", "catastrophic", "disaster",
})

TOPIC_KEYWORDS = {
    "politics": ("government", "election", "president", "vote", "political", "party", "democrat", "republican"),
    "health": ("doctor", "medical", "disease", "cure", "treatment", "patient", "hospital", "health"),
    "science": ("research", "study", "scientist", "experiment", "discovery", "theory", "evidence"),
    "finance": ("money", "market", "stock", "invest", "financial", "economy", "economic", "bank"),
}

LEFT_LEANING_TERMS = (
    "progressive", "liberal", "democrat", "socialism", "welfare", "diversity",
    "equality", "green", "abortion rights", "gun control",
)

RIGHT_LEANING_TERMS = (
    "conservative", "republican", "freedom", "tradition", "tax cuts",
    "second amendment", "pro-life", "religious liberty", "tough on crime",
)

CLAIM_COPULAS = frozenset({"is", "are", "was", "were"})
CLAIM_STUDY_VERBS = frozenset({"show", "indicate", "suggest"})
CITATION_MARKERS = ("cited", "source", "reference")

RELIABLE_DOMAINS = (
    "reuters.com", "apnews.com", "bbc.com", "bbc.co.uk", "npr.org", "pbs.org",
    "nytimes.com", "washingtonpost.com", "economist.com", "nature.com",
    "science.org", "nationalgeographic.com", "scientificamerican.com",
    "theguardian.com", "bloomberg.com", "wsj.com", "ft.com", "ap.org",
    "cnn.com", "time.com", "usatoday.com", "latimes.com", "chicagotribune.com",
)

UNRELIABLE_DOMAINS = (
    "infowars.com", "naturalnews.com", "breitbart.com", "dailywire.com",
    "activistpost.com", "worldnewsdailyreport.com", "beforeitsnews.com",
    "zerohedge.com", "wnd.com", "truthrevolt.org",
)

SATIRE_DOMAINS = (
    "theonion.com", "babylonbee.com", "clickhole.com", "thebeaverton.com",
    "waterfordwhispersnews.com", "duffelblog.com", "thehardtimes.net",
)
