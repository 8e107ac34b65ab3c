"""Auto-Classifier - infer a top-level category from noisy import text.

Scoring per top-level category:
- +100 when the category name matches the text: the whole lower-cased name
  is a substring of the text, or a distinctive word of the name appears as
  a whole word in the text. A distinctive word has three or more
  characters, is not a stopword, and occurs in no other category's name.
- +20 for every keyword of every family whose family name is a substring of
  the category name and whose keyword is a substring of the text

The highest score wins; on a tie the category met first in store order is
kept. Below the manual-assignment threshold the result is flagged and the
caller must route the row to a person instead of accepting it.
"""

import re
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from taxonomy.config import settings
from taxonomy.core.category_store import Category, CategoryStore
from taxonomy.core.keyword_config import get_keyword_families, normalize_keyword_families
from taxonomy.infra.logging import get_logger

logger = get_logger(__name__)

NAME_MATCH_SCORE = 100
KEYWORD_MATCH_SCORE = 20
MIN_NAME_WORD_LENGTH = 3

NAME_STOPWORDS = frozenset(
    {
        "and",
        "the",
        "for",
        "with",
        "from",
        "into",
        "per",
        "via",
        "other",
        "misc",
        "all",
    }
)

_WORD_RE = re.compile(r"[a-z0-9]+")


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one piece of text.

    Attributes:
        category: Best-scoring category, None when nothing scored
        confidence: Score of the best category (0 when nothing scored)
        threshold: Confidence required to skip manual assignment
        scores: Score per category id, in store order
    """

    category: Category | None
    confidence: int
    threshold: int
    scores: dict[str, int] = field(default_factory=dict)

    @property
    def needs_manual_assignment(self) -> bool:
        return self.category is None or self.confidence < self.threshold


def score_category(
    category: Category,
    text: str,
    keyword_families: Mapping[str, Sequence[str]],
    shared_words: Iterable[str] = (),
) -> int:
    """Score one category against already lower-cased text.

    Args:
        category: Candidate top-level category
        text: Lower-cased import text
        keyword_families: Normalized keyword family table
        shared_words: Name words that also occur in other categories' names;
            these never earn the name bonus on their own

    Returns:
        Integer score (0 when nothing matched)
    """
    category_name = category.name.lower()
    score = 0

    if _name_matches(category_name, text, frozenset(shared_words)):
        score += NAME_MATCH_SCORE

    for family, keywords in keyword_families.items():
        if family in category_name:
            score += KEYWORD_MATCH_SCORE * sum(1 for keyword in keywords if keyword in text)

    return score


def classify(
    text: str,
    store: CategoryStore,
    keyword_families: Mapping[str, Sequence[str]] | None = None,
    threshold: int | None = None,
) -> ClassificationResult:
    """Pick the best top-level category for free text.

    Stateless; safe to call once per import row, in any order or in
    parallel.

    Args:
        text: Free text (typically product name and code)
        store: Category store whose top-level categories are candidates
        keyword_families: Family table (defaults to the configured table)
        threshold: Manual-assignment threshold (defaults to settings)

    Returns:
        ClassificationResult with the best category and its confidence
    """
    if keyword_families is None:
        families = get_keyword_families()
    else:
        families = normalize_keyword_families(keyword_families)
    if threshold is None:
        threshold = settings.manual_assignment_threshold

    search_text = text.lower()
    candidates = store.categories()
    shared = shared_name_words(candidates)
    best: Category | None = None
    best_score = 0
    scores: dict[str, int] = {}

    for category in candidates:
        score = score_category(category, search_text, families, shared)
        scores[category.id] = score
        # Strict comparison keeps the first category on ties
        if score > best_score:
            best, best_score = category, score

    result = ClassificationResult(
        category=best,
        confidence=best_score,
        threshold=threshold,
        scores=scores,
    )

    logger.debug(
        "Classified text",
        text=text,
        category_id=best.id if best else None,
        confidence=best_score,
        needs_manual_assignment=result.needs_manual_assignment,
    )

    return result


def classify_row(
    name: str,
    code: str,
    store: CategoryStore,
    keyword_families: Mapping[str, Sequence[str]] | None = None,
    threshold: int | None = None,
) -> ClassificationResult:
    """Classify an import row from its product name and code."""
    return classify(f"{name} {code}", store, keyword_families, threshold)


def shared_name_words(categories: Iterable[Category]) -> frozenset[str]:
    """Name words that occur in more than one category's name."""
    counts = Counter(
        word for category in categories for word in set(_WORD_RE.findall(category.name.lower()))
    )
    return frozenset(word for word, count in counts.items() if count > 1)


def _distinctive_words(category_name: str, shared_words: frozenset[str]) -> set[str]:
    return {
        word
        for word in _WORD_RE.findall(category_name)
        if len(word) >= MIN_NAME_WORD_LENGTH
        and word not in NAME_STOPWORDS
        and word not in shared_words
    }


def _name_matches(category_name: str, text: str, shared_words: frozenset[str]) -> bool:
    if category_name and category_name in text:
        return True
    text_words = set(_WORD_RE.findall(text))
    return not _distinctive_words(category_name, shared_words).isdisjoint(text_words)


__all__ = [
    "ClassificationResult",
    "KEYWORD_MATCH_SCORE",
    "NAME_MATCH_SCORE",
    "NAME_STOPWORDS",
    "classify",
    "classify_row",
    "score_category",
    "shared_name_words",
]
