"""Tokenization and similarity for short free-text labels.

Goal names and activity descriptions are a few words of Chinese or English.
Tokens are lower-cased words; ideographic words also contribute their
two-character bigrams so that overlapping compounds ("写论文" and
"论文修改") share tokens.
"""

import re
from collections.abc import Iterable

TokenSet = frozenset[str]

STOP_WORDS: frozenset[str] = frozenset(
    {
        # Chinese function words
        "的", "了", "和", "与", "或", "在", "是", "有", "个", "这", "那",
        # English function words
        "the", "a", "an", "and", "or", "in", "on", "at", "to", "for",
        # Generic planning verbs
        "完成", "继续", "开始", "进行", "准备", "计划",
    }
)  # fmt: skip

# Whitespace plus ASCII and full-width punctuation
_SPLIT_PATTERN = re.compile(
    r"[\s,，。.、;；:：!！?？(（)）\[\]【】{}<>《》"
    r"\"“”'‘’`~·\-_+=|\\/@#$%^&*]+"
)
_IDEOGRAPH_PATTERN = re.compile(r"[\u4e00-\u9fa5]")

CONTAINMENT_SCORE = 0.6


def tokenize_ordered(text: str | None) -> list[str]:
    """Tokens of a label, de-duplicated, in first-occurrence order.

    Args:
        text: Goal name or activity description

    Returns:
        List of tokens (empty for blank input)
    """
    if not text:
        return []

    tokens: dict[str, None] = {}
    for word in _SPLIT_PATTERN.split(text.lower().strip()):
        if not word or word in STOP_WORDS or len(word) <= 1:
            continue
        tokens[word] = None
        if _IDEOGRAPH_PATTERN.search(word) and len(word) > 2:
            for i in range(len(word) - 1):
                bigram = word[i : i + 2]
                if bigram not in STOP_WORDS:
                    tokens[bigram] = None
    return list(tokens)


def tokenize(text: str | None) -> TokenSet:
    """Split a label into its set of normalized tokens."""
    return frozenset(tokenize_ordered(text))


def jaccard_similarity(tokens1: Iterable[str], tokens2: Iterable[str]) -> float:
    """Jaccard index of two token collections; 0.0 if either is empty."""
    set1 = set(tokens1)
    set2 = set(tokens2)
    if not set1 or not set2:
        return 0.0
    intersection = len(set1 & set2)
    union = len(set1) + len(set2) - intersection
    return intersection / union if union > 0 else 0.0


def similarity(text1: str, text2: str) -> float:
    """Token-set similarity of two labels."""
    return jaccard_similarity(tokenize(text1), tokenize(text2))


def text_similarity_with_containment(text1: str, text2: str) -> float:
    """Similarity that treats substring containment as a strong match.

    "写论文" vs "写论文第三章" scores at least 0.6 even though their token
    sets overlap only partially.
    """
    score = similarity(text1, text2)
    name1 = text1.lower()
    name2 = text2.lower()
    # An empty name is a substring of everything
    if name1 and name2 and (name1 in name2 or name2 in name1):
        return max(score, CONTAINMENT_SCORE)
    return score


def significant_overlap(tokens1: Iterable[str], tokens2: Iterable[str]) -> bool:
    """True if the collections share a token of two or more characters."""
    shared = set(tokens1) & set(tokens2)
    return any(len(token) >= 2 for token in shared)


__all__ = [
    "CONTAINMENT_SCORE",
    "STOP_WORDS",
    "TokenSet",
    "jaccard_similarity",
    "significant_overlap",
    "similarity",
    "text_similarity_with_containment",
    "tokenize",
    "tokenize_ordered",
]
