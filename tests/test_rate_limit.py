from __future__ import annotations

from filtersfast.core.config import settings
from filtersfast.core.rate_limit import InMemoryRateLimiter
from filtersfast.api.deps.rate_limit import get_rate_limiter


class _Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_fixed_window_rejects_after_max_requests():
    clock = _Clock()
    limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60, clock=clock)

    assert [limiter.check("user:a") for _ in range(4)] == [True, True, True, False]
    assert limiter.check("user:b") is True


def test_window_resets_after_it_elapses():
    clock = _Clock()
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=clock)

    assert limiter.check("ip:1.2.3.4") is True
    assert limiter.check("ip:1.2.3.4") is False

    clock.now += 61
    assert limiter.check("ip:1.2.3.4") is True


def test_expired_windows_are_swept():
    clock = _Clock()
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=10, sweep_seconds=30, clock=clock)

    for key in ("a", "b", "c"):
        limiter.check(key)
    assert limiter.tracked_keys() == 3

    clock.now += 31
    limiter.check("d")
    assert limiter.tracked_keys() == 1


def test_endpoint_returns_429_when_limit_exceeded(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    limiter = get_rate_limiter()
    monkeypatch.setattr(limiter, "max_requests", 2)

    headers = {"X-User-Email": "buyer@example.com"}
    statuses = [
        client.post("/api/cart/rewards", json={"items": []}, headers=headers).status_code
        for _ in range(3)
    ]

    assert statuses == [200, 200, 429]
    assert client.post("/api/cart/rewards", json={"items": []}, headers=headers).json() == {
        "detail": "Rate limit exceeded"
    }

    other = client.post(
        "/api/cart/rewards",
        json={"items": []},
        headers={"X-Forwarded-For": "10.0.0.9, 10.0.0.1"},
    )
    assert other.status_code == 200


def test_rate_limit_can_be_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
    monkeypatch.setattr(get_rate_limiter(), "max_requests", 1)

    statuses = {client.get("/api/admin/deals").status_code for _ in range(3)}

    assert statuses == {200}
