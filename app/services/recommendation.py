"""
Recommendation Parser.

Extracts the review disposition from generated review text. Best effort:
the parser always returns one of the three dispositions and never raises.
"""

import re

from app.models.review import ReviewEvent

RECOMMENDATION_PATTERN = re.compile(r"## 🏁 Recommendation\s*\*?\*?([A-Z_]+)", re.IGNORECASE)


def parse_recommendation(review: str) -> ReviewEvent:
    """
    Parse the disposition from a generated review.

    The explicit "🏁 Recommendation" section wins. Otherwise keywords decide:
    "request changes", or "issues found" together with "critical", means
    REQUEST_CHANGES; "approve" or "looks good" means APPROVE; anything else
    is a plain COMMENT.
    """
    match = RECOMMENDATION_PATTERN.search(review)
    if match:
        token = match.group(1).upper()
        if token in ReviewEvent.__members__:
            return ReviewEvent(token)

    text = review.lower()
    if "request changes" in text or ("issues found" in text and "critical" in text):
        return ReviewEvent.REQUEST_CHANGES
    if "approve" in text or "looks good" in text:
        return ReviewEvent.APPROVE

    return ReviewEvent.COMMENT
