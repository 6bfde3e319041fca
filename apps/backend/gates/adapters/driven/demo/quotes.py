from __future__ import annotations

import hashlib
from typing import Sequence

DEMO_QUOTES = (
    "Deployment paused until the release notes are reviewed.",
    "Waiting for the smoke tests on staging to go green.",
    "Closed for the database migration window.",
    "Opened after sign-off from the on-call engineer.",
    "Holding until the load test results are in.",
    "Closed while the incident is being investigated.",
    "Reopened, rollback verified in production.",
    "Change freeze for the end-of-quarter reporting.",
    "Gate kept closed over the weekend.",
    "Monitoring looks stable, good to go.",
)


class CannedQuotesProvider:
    """Picks a phrase from a fixed list; the same comment id always gets the same phrase."""

    def __init__(self, quotes: Sequence[str] = DEMO_QUOTES):
        if not quotes:
            raise ValueError("at least one quote is required")
        self._quotes = tuple(quotes)

    def quote_for(self, comment_id: str) -> str:
        digest = hashlib.sha256(comment_id.encode("utf-8")).digest()
        return self._quotes[int.from_bytes(digest[:8], "big") % len(self._quotes)]
