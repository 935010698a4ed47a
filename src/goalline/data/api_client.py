"""Live stats client for sourcing an announcement.

Pulls per-player goals and assists for a gameweek from the official FPL
API and lines them up in roster order, ready for announce_result().

Handles:
- Rate limiting with adaptive delays
- Retry logic with exponential backoff for transient failures (network, 429, 5xx)
- Fail-fast on other client errors

Key Classes:
    StatsApiClient - HTTP client for the FPL live endpoint

Usage:
    from goalline.data.api_client import StatsApiClient

    client = StatsApiClient()
    goals, assists = client.get_roster_stats(gw=20, element_ids=[328, 351, 366, 349, 311, 290])
"""

from __future__ import annotations

import logging
import random
import time
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from goalline.config import FPL_BASE_URL, MAX_RETRIES, REQUEST_DELAY

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "live": f"{FPL_BASE_URL}/event/{{gw}}/live/",
}

MAX_DELAY = 60  # Maximum backoff delay in seconds
RATE_LIMIT_STATUS = 429  # HTTP "Too Many Requests"
DEFAULT_RETRY_AFTER = 30  # Seconds to wait on a 429 without Retry-After
REQUEST_TIMEOUT = 30


class StatsApiClient:
    """HTTP client for gameweek goal/assist stats."""

    def __init__(self, request_delay: float = REQUEST_DELAY):
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "goalline/0.1"})
        self._base_delay = request_delay
        self._current_delay = request_delay

    def _get(self, url: str, retries: int = MAX_RETRIES) -> Optional[Dict]:
        """GET a JSON document, retrying what a retry can fix.

        Connection errors, timeouts, 429 and 5xx responses are retried up to
        `retries` attempts in total. Any other 4xx means the request itself
        is wrong (e.g. an unknown gameweek) and gives up at once.

        Returns:
            Parsed JSON, or None once the attempts are used up
        """
        for attempt in range(1, retries + 1):
            self._pace()
            try:
                resp = self.session.get(url, timeout=REQUEST_TIMEOUT)
            except requests.RequestException as e:
                self._backoff(attempt, retries, f"{type(e).__name__}: {e}")
                continue

            status = resp.status_code
            if status == RATE_LIMIT_STATUS:
                self._throttle(resp)
                continue
            if status >= 500:
                self._backoff(attempt, retries, f"server error {status}")
                continue
            if status >= 400:
                logger.error(f"GET {url} rejected with {status}, not retrying")
                return None

            self._relax()
            return resp.json()

        logger.error(f"Giving up on {url} after {retries} attempts")
        return None

    def _pace(self) -> None:
        """Sleep the current inter-request delay, plus up to 30% jitter."""
        if self._current_delay > 0:
            time.sleep(self._current_delay * random.uniform(1.0, 1.3))

    def _backoff(self, attempt: int, retries: int, reason: str) -> None:
        if attempt >= retries:
            logger.warning(f"Attempt {attempt}/{retries} failed: {reason}")
            return
        wait = min(2 ** (attempt - 1) + random.uniform(0, 1), MAX_DELAY)
        logger.warning(f"Attempt {attempt}/{retries} failed: {reason}. Retrying in {wait:.1f}s")
        time.sleep(wait)

    def _throttle(self, resp: requests.Response) -> None:
        """Honour Retry-After on a 429 and double the pacing delay."""
        try:
            retry_after = float(resp.headers.get("Retry-After", DEFAULT_RETRY_AFTER))
        except (TypeError, ValueError):
            retry_after = DEFAULT_RETRY_AFTER
        retry_after = min(max(retry_after, 0), MAX_DELAY)
        self._current_delay = min(max(self._current_delay, 0.5) * 2, MAX_DELAY)
        logger.warning(
            f"Rate limited, sleeping {retry_after:.0f}s; pacing now {self._current_delay:.1f}s"
        )
        time.sleep(retry_after)

    def _relax(self) -> None:
        """Ease the pacing delay back toward its base after a success."""
        self._current_delay = max(self._base_delay, self._current_delay * 0.9)

    def get_live(self, gw: int) -> Dict:
        """Get live player stats for a gameweek.

        Raises:
            RuntimeError: If the data cannot be fetched
        """
        logger.info(f"Fetching GW{gw} live stats...")
        data = self._get(ENDPOINTS["live"].format(gw=gw))
        if data is None:
            raise RuntimeError(f"Failed to fetch GW{gw} live stats")
        return data

    def get_roster_stats(self, gw: int, element_ids: Sequence[int]) -> Tuple[List[int], List[int]]:
        """Goals and assists for each roster player, in roster order.

        Args:
            gw: Gameweek to read
            element_ids: FPL element id of each roster player, indexed by roster id

        Returns:
            Tuple of (goals, assists), both len(element_ids) long.
            Players absent from the live data count as 0/0.
        """
        elements = self.get_live(gw).get("elements", [])
        stats_by_id = {e.get("id"): e.get("stats", {}) for e in elements}

        goals: List[int] = []
        assists: List[int] = []
        for element_id in element_ids:
            stats = stats_by_id.get(element_id)
            if stats is None:
                logger.warning(f"Element {element_id} missing from GW{gw} live data, using 0/0")
                stats = {}
            goals.append(int(stats.get("goals_scored", 0)))
            assists.append(int(stats.get("assists", 0)))
        return goals, assists
