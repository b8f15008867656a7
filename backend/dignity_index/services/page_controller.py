"""Evaluator page state: input text, busy flag, last result, notification.

One ``AnalyzerPage`` exists per loaded copy of the page. A failed analysis
keeps the previous result on screen; only a successful one replaces it.
"""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from typing import Awaitable, Callable

from dignity_index.core.config import get_settings
from dignity_index.services.ai.dignity.contracts import AnalysisResult
from dignity_index.services.ai.dignity.service import AnalysisFailedError, analyze_dignity

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter some text to analyze"
ANALYSIS_FAILED_MESSAGE = "Failed to analyze text. Please try again."
TOO_LONG_MESSAGE = "Please shorten your text to at most {limit} characters"

Analyzer = Callable[[str], Awaitable[AnalysisResult]]


def input_error(text: str) -> str | None:
    """Notification for input that must not be sent, or None when it is fine."""
    if not text.strip():
        return EMPTY_INPUT_MESSAGE
    limit = get_settings().dignity_max_input_chars
    if len(text) > limit:
        return TOO_LONG_MESSAGE.format(limit=limit)
    return None


class AnalyzerPage:
    def __init__(self, analyze: Analyzer | None = None) -> None:
        self._analyze = analyze or analyze_dignity
        self.input_text = ""
        self.is_analyzing = False
        self.result: AnalysisResult | None = None
        self.notification: str | None = None

    async def handle_analyze(self, text: str | None = None) -> bool:
        """Run one analysis; returns True when a new result was stored.

        A call made while another one is in flight does nothing.
        """
        if self.is_analyzing:
            logger.info("Analyze ignored: request already in flight")
            return False

        if text is not None:
            self.input_text = text
        self.notification = None

        error = input_error(self.input_text)
        if error:
            logger.error(error)
            self.notification = error
            return False

        self.is_analyzing = True
        try:
            self.result = await self._analyze(self.input_text)
        except AnalysisFailedError:
            logger.error("Error analyzing text", exc_info=True)
            self.notification = ANALYSIS_FAILED_MESSAGE
            return False
        finally:
            self.is_analyzing = False
        return True


class PageSessionStore:
    """In-memory page sessions keyed by an opaque id, oldest evicted first."""

    def __init__(self, *, max_sessions: int = 5000, analyze: Analyzer | None = None) -> None:
        self._pages: OrderedDict[str, AnalyzerPage] = OrderedDict()
        self._max_sessions = max(1, int(max_sessions))
        self._analyze = analyze

    def __len__(self) -> int:
        return len(self._pages)

    def create(self) -> tuple[str, AnalyzerPage]:
        session_id = secrets.token_urlsafe(24)
        page = AnalyzerPage(analyze=self._analyze)
        self._pages[session_id] = page
        while len(self._pages) > self._max_sessions:
            evicted, _ = self._pages.popitem(last=False)
            logger.debug("Evicted page session %s", evicted[:8])
        return session_id, page

    def get(self, session_id: str | None) -> AnalyzerPage | None:
        if not session_id:
            return None
        page = self._pages.get(session_id)
        if page is not None:
            self._pages.move_to_end(session_id)
        return page

    def get_or_create(self, session_id: str | None) -> tuple[str, AnalyzerPage]:
        page = self.get(session_id)
        if page is not None:
            return session_id, page
        return self.create()

    def discard(self, session_id: str | None) -> None:
        if session_id:
            self._pages.pop(session_id, None)

    def reset(self) -> None:
        self._pages.clear()
