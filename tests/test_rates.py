import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from core.rates import (
    DSCR_MESSAGES_KEY,
    INTEREST_RATES_KEY,
    TAX_INSURANCE_KEY,
    RateCache,
    RateProvider,
    RateSourceError,
)
from dscr_calc.calculators import fallback_dscr_message
from dscr_calc.presets import NO_MESSAGE

TAX_DOC = {
    "defaults": {"taxes": {"percentage": 1.1}, "insurance": {"percentage": 0.4}},
    "stateData": {"TX": {"taxes": 1.8, "insurance": 0.9}, "CA": {"taxes": 0.75, "insurance": 0.3}},
}
RATES_DOC = {
    "rates": [
        {"type": "conventional", "term": 30, "rate": 6.5},
        {"type": "dsceInvestmentProperty", "term": 15, "rate": 6.9},
        {"type": "dsceInvestmentProperty", "term": 30, "rate": 7.25},
    ]
}
MESSAGES_DOC = {
    "dscrMessages": [
        {"min": 0, "max": 0.99, "message": "low"},
        {"min": 1.0, "max": 1.5, "message": "ok"},
        {"min": 1.2, "max": 10, "message": "great"},
    ]
}


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError("offline")
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)


def make_provider(tax=TAX_DOC, rates=RATES_DOC, messages=MESSAGES_DOC, cache=None):
    routes = {}
    if tax is not None:
        routes["tax"] = tax
    if rates is not None:
        routes["rates"] = rates
    if messages is not None:
        routes["messages"] = messages
    session = FakeSession(routes)
    provider = RateProvider(
        cache=cache,
        session=session,
        timeout=1,
        tax_ins_url="tax",
        rates_url="rates",
        messages_url="messages",
    )
    return provider, session


def test_state_rates_known_and_unknown_state():
    provider, _ = make_provider()
    assert provider.get_state_rates("TX") == {"taxes": 1.8, "insurance": 0.9}
    assert provider.get_state_rates("tx") == {"taxes": 1.8, "insurance": 0.9}
    assert provider.get_state_rates("ZZ") == {"taxes": 1.1, "insurance": 0.4}


def test_state_rates_fallback_on_network_failure(caplog):
    provider, _ = make_provider(tax=None)
    assert provider.get_state_rates("TX") == {"taxes": 1.25, "insurance": 0.35}
    assert "fallback state rates" in caplog.text


def test_state_rates_fallback_on_malformed_document():
    provider, _ = make_provider(tax={"stateData": {}})
    assert provider.get_state_rates("TX") == {"taxes": 1.25, "insurance": 0.35}


def test_default_interest_rate_fallback_on_malformed_document(caplog):
    provider, _ = make_provider(rates={"rates": 5})
    assert provider.get_default_interest_rate() == 6.125
    provider, _ = make_provider(rates={"rates": [1, 2]})
    assert provider.get_default_interest_rate() == 6.125
    assert "fallback interest rate" in caplog.text


def test_dscr_message_fallback_on_malformed_document():
    provider, _ = make_provider(messages={"dscrMessages": 5})
    assert provider.get_dscr_message(1.3) == fallback_dscr_message(1.3)
    provider, _ = make_provider(messages={"dscrMessages": [1, 2]})
    assert provider.get_dscr_message(1.3) == fallback_dscr_message(1.3)


def test_dscr_message_range_without_text():
    provider, _ = make_provider(messages={"dscrMessages": [{"min": 0, "max": 5}]})
    assert provider.get_dscr_message(1.3) == NO_MESSAGE


def test_default_interest_rate_lookup():
    provider, _ = make_provider()
    assert provider.get_default_interest_rate() == 7.25


def test_default_interest_rate_fallbacks():
    provider, _ = make_provider(rates=None)
    assert provider.get_default_interest_rate() == 6.125
    provider, _ = make_provider(rates={"rates": [{"type": "conventional", "term": 30, "rate": 6.5}]})
    assert provider.get_default_interest_rate() == 6.125
    provider, _ = make_provider(rates=FakeResponse({}, status=503))
    assert provider.get_default_interest_rate() == 6.125
    provider, _ = make_provider(rates=FakeResponse(ValueError("not json")))
    assert provider.get_default_interest_rate() == 6.125


def test_dscr_message_first_inclusive_range_wins():
    provider, _ = make_provider()
    assert provider.get_dscr_message(0.5) == "low"
    assert provider.get_dscr_message(1.0) == "ok"
    assert provider.get_dscr_message(1.3) == "ok"
    assert provider.get_dscr_message(1.5) == "ok"
    assert provider.get_dscr_message(2.0) == "great"
    assert provider.get_dscr_message(0.995) == NO_MESSAGE


def test_dscr_message_fallback_ladder():
    provider, _ = make_provider(messages=None)
    for value in (0.2, 0.8, 1.1, 1.4):
        assert provider.get_dscr_message(value) == fallback_dscr_message(value)


def test_documents_are_cached_per_key():
    provider, session = make_provider()
    provider.get_state_rates("TX")
    provider.get_state_rates("CA")
    provider.get_default_interest_rate()
    provider.get_default_interest_rate()
    assert session.calls == ["tax", "rates"]
    assert TAX_INSURANCE_KEY in provider.cache
    assert INTEREST_RATES_KEY in provider.cache
    assert DSCR_MESSAGES_KEY not in provider.cache


def test_failures_are_not_cached():
    provider, session = make_provider(messages=None)
    provider.get_dscr_message(1.0)
    session.routes["messages"] = MESSAGES_DOC
    assert provider.get_dscr_message(1.0) == "ok"
    assert session.calls == ["messages", "messages"]


def test_shared_cache_between_providers():
    cache = RateCache()
    first, _ = make_provider(cache=cache)
    first.get_default_interest_rate()
    second, session = make_provider(rates=None, cache=cache)
    assert second.get_default_interest_rate() == 7.25
    assert session.calls == []
    cache.clear()
    assert INTEREST_RATES_KEY not in cache


def test_fetch_json_raises_source_error():
    provider, _ = make_provider(tax=None)
    with pytest.raises(RateSourceError):
        provider.fetch_json(TAX_INSURANCE_KEY)
    provider, _ = make_provider(tax=["not", "a", "dict"])
    with pytest.raises(RateSourceError):
        provider.fetch_json(TAX_INSURANCE_KEY)
