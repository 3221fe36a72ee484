"""
Tests for rate limiting and client identification
"""

from types import SimpleNamespace

from seatsmart.utils.security import RateLimiter, get_client_ip

def make_request(headers=None, host="10.0.0.9"):
    client = SimpleNamespace(host=host) if host else None
    return SimpleNamespace(headers=headers or {}, client=client)

def test_rate_limiter_blocks_after_limit():
    """Test requests beyond the limit are refused per client"""
    limiter = RateLimiter()

    assert [limiter.check("a", limit=2) for _ in range(3)] == [True, True, False]
    assert limiter.check("b", limit=2)

def test_rate_limiter_drops_expired_requests(monkeypatch):
    """Test requests older than the window no longer count"""
    limiter = RateLimiter(window_seconds=60)
    now = [1000.0]
    monkeypatch.setattr("seatsmart.utils.security.time.time", lambda: now[0])

    assert limiter.check("a", limit=1)
    assert not limiter.check("a", limit=1)

    now[0] += 61
    assert limiter.check("a", limit=1)

def test_rate_limiter_reset():
    """Test reset forgets all clients"""
    limiter = RateLimiter()
    limiter.check("a", limit=1)

    limiter.reset()

    assert limiter.check("a", limit=1)

def test_get_client_ip_prefers_forwarded_for():
    """Test the first forwarded address wins"""
    request = make_request({"X-Forwarded-For": "1.2.3.4, 5.6.7.8", "X-Real-IP": "9.9.9.9"})
    assert get_client_ip(request) == "1.2.3.4"

def test_get_client_ip_real_ip_then_client():
    """Test the fallbacks in order"""
    assert get_client_ip(make_request({"X-Real-IP": "9.9.9.9"})) == "9.9.9.9"
    assert get_client_ip(make_request()) == "10.0.0.9"
    assert get_client_ip(make_request(host=None)) == "unknown"
