from __future__ import annotations

import threading
from datetime import timedelta

from src.workhours.workhours.core.enums import TokenHorizon
from src.workhours.workhours.tokens.issuer import WorkTokenIssuer
from src.workhours.workhours.tokens.provider import CurrentTokenProvider

from tests.helpers import SECRET


class CountingIssuer:
    def __init__(self, inner, *, gate: threading.Event | None = None):
        self._inner = inner
        self._gate = gate
        self.calls = 0
        self._lock = threading.Lock()

    def issue(self, event, *, now):
        with self._lock:
            self.calls += 1
        if self._gate:
            self._gate.wait(timeout=5)
        return self._inner.issue(event, now=now)

    def expiry_for(self, event, *, now):
        return self._inner.expiry_for(event, now=now)


def test_current_reuses_fresh_token(issuer, event, fixed_now):
    counting = CountingIssuer(issuer)
    provider = CurrentTokenProvider(counting, refresh_margin=timedelta(minutes=10))

    first = provider.current(event, now=fixed_now)
    second = provider.current(event, now=fixed_now + timedelta(hours=1))

    assert first == second
    assert counting.calls == 1


def test_current_remints_inside_refresh_margin(issuer, event, fixed_now):
    counting = CountingIssuer(issuer)
    provider = CurrentTokenProvider(counting, refresh_margin=timedelta(minutes=10))

    first = provider.current(event, now=fixed_now)
    later = first.expires_at - timedelta(minutes=5)
    second = provider.current(event, now=later)

    assert second.nonce != first.nonce
    assert counting.calls == 2


def test_refresh_always_mints(issuer, event, fixed_now):
    counting = CountingIssuer(issuer)
    provider = CurrentTokenProvider(counting)

    provider.current(event, now=fixed_now)
    refreshed = provider.refresh(event, now=fixed_now)

    assert counting.calls == 2
    assert provider.current(event, now=fixed_now) == refreshed


def test_concurrent_requests_share_one_mint(issuer, event, fixed_now):
    gate = threading.Event()
    counting = CountingIssuer(issuer, gate=gate)
    provider = CurrentTokenProvider(counting)
    results = []

    def worker():
        results.append(provider.current(event, now=fixed_now))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    # Let every thread reach the flight before the leader finishes.
    threading.Event().wait(0.2)
    gate.set()
    for t in threads:
        t.join(timeout=5)

    assert len(results) == 8
    assert counting.calls == 1
    assert len({r.nonce for r in results}) == 1


def test_event_end_horizon_keeps_token_near_the_end(event, fixed_now):
    counting = CountingIssuer(WorkTokenIssuer(SECRET, horizon=TokenHorizon.EVENT_END))
    provider = CurrentTokenProvider(counting, refresh_margin=timedelta(minutes=10))

    first = provider.current(event, now=fixed_now)
    near_end = event.end_time - timedelta(minutes=5)
    later = [provider.current(event, now=near_end + timedelta(seconds=i)) for i in range(5)]

    # A new token would expire at the same event end, so the cached one stays current.
    assert {t.nonce for t in later} == {first.nonce}
    assert counting.calls == 1
