# -*- coding: utf-8 -*-
"""
Header type-ahead search box.

Debounces keystrokes with a ``threading.Timer`` and shows a short result
dropdown once the text has at least ``min_chars`` characters.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional
from urllib.parse import urlencode

import requests

from pipe_catalog.client.controller import SEARCH_PAGE_PATH, SEARCH_PATH
from pipe_catalog.models import SearchableItem
from pipe_catalog.settings import settings

logger = logging.getLogger(__name__)


class TypeaheadBox:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Any = None,
        delay: float = 0.3,
        min_chars: int = 2,
        limit: int = 8,
        on_results: Optional[Callable[[List[SearchableItem]], None]] = None,
        timeout: Optional[float] = None,
    ):
        base = settings.CATALOG_API_URL if base_url is None else base_url
        self.endpoint = f"{base.rstrip('/')}{SEARCH_PATH}"
        self.session = session if session is not None else requests.Session()
        self.delay = delay
        self.min_chars = min_chars
        self.limit = limit
        self.on_results = on_results
        self.timeout = settings.CLIENT_TIMEOUT if timeout is None else timeout

        self.text = ""
        self.results: List[SearchableItem] = []
        self.loading = False
        self.show_results = False

        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._seq = 0
        self._closed = False

    def type(self, text: str) -> None:
        """Set the box text and (re)start the debounce timer."""
        with self._lock:
            self.text = text
            if self._timer is not None:
                self._timer.cancel()
            if self._closed:
                return
            self._seq += 1
            self._timer = threading.Timer(self.delay, self._fire, args=(text, self._seq))
            self._timer.daemon = True
            self._timer.start()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the pending debounce (and its request) has finished."""
        timer = self._timer
        if timer is not None:
            timer.join(timeout)

    def _current(self, seq: int) -> bool:
        return not self._closed and seq == self._seq

    def _fire(self, text: str, seq: int) -> None:
        if len(text.strip()) < self.min_chars:
            with self._lock:
                if self._current(seq):
                    self.results = []
                    self.show_results = False
                    self.loading = False
            return

        with self._lock:
            if not self._current(seq):
                return
            self.loading = True
        try:
            resp = self.session.get(
                self.endpoint,
                params={"q": text, "limit": str(self.limit)},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            results = [SearchableItem.model_validate(r) for r in resp.json().get("results") or []]
        except Exception as e:
            logger.error("Type-ahead search error for q=%r: %s", text, e)
            with self._lock:
                if self._current(seq):
                    self.results = []
            return
        finally:
            # only the latest request owns the spinner
            with self._lock:
                if self._current(seq):
                    self.loading = False

        with self._lock:
            if not self._current(seq):
                return
            self.results = results
            self.show_results = True
        if self.on_results is not None:
            self.on_results(results)

    def submit(self) -> Optional[str]:
        """Address of the full search page for the current text, or None if blank."""
        if not self.text.strip():
            return None
        self.show_results = False
        return f"{SEARCH_PAGE_PATH}?{urlencode({'q': self.text})}"

    def select_result(self) -> None:
        self.show_results = False
        self.type("")

    def close(self) -> None:
        """Cancel pending work; completions arriving later are ignored."""
        with self._lock:
            self._closed = True
            self.loading = False
            if self._timer is not None:
                self._timer.cancel()
