"""Remote rate data: default interest rate, state tax/insurance, DSCR messages.

Each JSON document is fetched once and kept in a ``RateCache`` for the life of
the process. Every public lookup degrades to a documented fallback when the
document cannot be loaded, so callers never see a network error.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import requests

from core import config
from dscr_calc.calculators import fallback_dscr_message, nz
from dscr_calc.presets import (
    DEFAULT_RATE_TERM,
    DEFAULT_RATE_TYPE,
    FALLBACK_INTEREST_RATE,
    FALLBACK_STATE_RATES,
    NO_MESSAGE,
)

logger = logging.getLogger(__name__)

TAX_INSURANCE_KEY = "taxInsurance"
INTEREST_RATES_KEY = "interestRates"
DSCR_MESSAGES_KEY = "dscrMessages"


class RateSourceError(RuntimeError):
    """A rate document could not be fetched or had an unexpected shape."""


class RateCache:
    """In-memory document cache keyed by name. Entries never expire."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data


class RateProvider:
    """Looks up rates and DSCR messages from the remote JSON documents."""

    def __init__(
        self,
        cache: Optional[RateCache] = None,
        session=None,
        timeout: Optional[float] = None,
        tax_ins_url: str = config.TAX_INS_URL,
        rates_url: str = config.RATES_URL,
        messages_url: str = config.DSCR_MESSAGES_URL,
    ) -> None:
        self.cache = cache if cache is not None else RateCache()
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else config.http_timeout()
        self.urls = {
            TAX_INSURANCE_KEY: tax_ins_url,
            INTEREST_RATES_KEY: rates_url,
            DSCR_MESSAGES_KEY: messages_url,
        }

    def fetch_json(self, key: str) -> Dict[str, Any]:
        """Return the cached document for ``key``, fetching it on first use.

        Failed fetches are not cached, so the next lookup tries again.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        url = self.urls[key]
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise RateSourceError(f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise RateSourceError(f"invalid JSON from {url}: {exc}") from exc
        if not isinstance(data, dict):
            raise RateSourceError(f"unexpected document from {url}")
        logger.info("Loaded rate document '%s' from %s", key, url)
        self.cache.set(key, data)
        return data

    def fetch_state_rates(self, state_code: str) -> Dict[str, float]:
        data = self.fetch_json(TAX_INSURANCE_KEY)
        try:
            state = (data.get("stateData") or {}).get(state_code.upper())
            if state:
                return {"taxes": float(state["taxes"]), "insurance": float(state["insurance"])}
            defaults = data["defaults"]
            return {
                "taxes": float(defaults["taxes"]["percentage"]),
                "insurance": float(defaults["insurance"]["percentage"]),
            }
        except (KeyError, TypeError, ValueError) as exc:
            raise RateSourceError(f"malformed tax/insurance document: {exc}") from exc

    def get_state_rates(self, state_code: str) -> Dict[str, float]:
        """Annual tax and insurance percentages for a two-letter state code.

        Unknown codes get the document's nationwide defaults.
        """
        try:
            return self.fetch_state_rates(state_code)
        except RateSourceError as exc:
            logger.warning("Using fallback state rates for %s: %s", state_code, exc)
            return dict(FALLBACK_STATE_RATES)

    def get_default_interest_rate(self) -> float:
        try:
            data = self.fetch_json(INTEREST_RATES_KEY)
            for entry in data.get("rates") or []:
                if entry.get("type") == DEFAULT_RATE_TYPE and entry.get("term") == DEFAULT_RATE_TERM:
                    return nz(entry.get("rate")) or FALLBACK_INTEREST_RATE
        except (RateSourceError, AttributeError, TypeError, ValueError) as exc:
            logger.warning("Using fallback interest rate: %s", exc)
        return FALLBACK_INTEREST_RATE

    def get_dscr_message(self, value: float) -> str:
        """First configured ``{min, max, message}`` range containing ``value``.

        Ranges are inclusive at both ends and checked in document order, so
        an earlier range wins where two overlap.
        """
        try:
            data = self.fetch_json(DSCR_MESSAGES_KEY)
            for entry in data.get("dscrMessages") or []:
                if nz(entry.get("min")) <= value <= nz(entry.get("max")):
                    return str(entry.get("message") or NO_MESSAGE)
        except (RateSourceError, AttributeError, TypeError, ValueError) as exc:
            logger.warning("Using fallback DSCR message: %s", exc)
            return fallback_dscr_message(value)
        return NO_MESSAGE
