"""Relevance scoring shared by global search and location search."""

EXACT_TITLE = 100
TITLE_CONTAINS = 50
WORD_PAIR = 10
DESCRIPTION_CONTAINS = 20


def score_relevance(query: str, title: str | None, description: str | None = None) -> int:
    """Score how well title/description match query (case-insensitive, >= 0).

    - title equal to query: +100, else title containing query: +50
    - every (query word, title word) pair where the title word contains the
      query word: +10 each
    - description containing query: +20

    Components add up; an empty query scores 0.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return 0
    title_text = (title or "").lower()
    description_text = (description or "").lower()

    score = 0
    if title_text == needle:
        score += EXACT_TITLE
    elif needle in title_text:
        score += TITLE_CONTAINS

    title_words = title_text.split()
    for query_word in needle.split():
        score += WORD_PAIR * sum(1 for word in title_words if query_word in word)

    if needle in description_text:
        score += DESCRIPTION_CONTAINS
    return score
