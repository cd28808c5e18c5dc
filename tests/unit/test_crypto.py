from authroutes.utils.crypto import NONCE_QUERY_ARG, TokenService
from authroutes.utils.urls import get_query_arg


class Clock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_nonce_is_stable_within_a_tick():
    clock = Clock(1_700_000_010.0)
    tokens = TokenService("secret", lifetime=100, clock=clock)
    nonce = tokens.create_nonce("log-out")

    clock.now += 1
    assert tokens.create_nonce("log-out") == nonce
    assert len(nonce) == 10


def test_nonce_is_scoped_to_action_and_user():
    tokens = TokenService("secret", clock=Clock(1_700_000_010.0))

    assert tokens.create_nonce("log-out") != tokens.create_nonce("other")
    assert tokens.for_user(7).create_nonce("log-out") != tokens.create_nonce("log-out")


def test_verify_accepts_current_and_previous_tick_only():
    clock = Clock(1_700_000_010.0)
    tokens = TokenService("secret", lifetime=100, clock=clock)
    nonce = tokens.create_nonce("log-out")

    assert tokens.verify_nonce(nonce, "log-out") == 1
    assert tokens.verify_nonce(nonce, "other") == 0
    assert tokens.verify_nonce("", "log-out") == 0

    clock.now += 50
    assert tokens.verify_nonce(nonce, "log-out") == 2

    clock.now += 50
    assert tokens.verify_nonce(nonce, "log-out") == 0


def test_nonce_url_keeps_existing_arguments():
    tokens = TokenService("secret", clock=Clock(1_700_000_010.0))
    url = tokens.nonce_url("http://example.com/logout/?redirect_to=%2Fhome", "log-out")

    assert get_query_arg("redirect_to", url) == "/home"
    assert get_query_arg(NONCE_QUERY_ARG, url) == tokens.create_nonce("log-out")


def test_different_secrets_give_different_nonces():
    clock = Clock(1_700_000_010.0)

    assert TokenService("a", clock=clock).create_nonce("x") != TokenService("b", clock=clock).create_nonce("x")


def test_auth_cookie_round_trip():
    clock = Clock(1_700_000_010.0)
    tokens = TokenService("secret", clock=clock)
    cookie = tokens.create_auth_cookie("bob@example.com", lifetime=60)

    assert tokens.validate_auth_cookie(cookie) == "bob@example.com"
    assert "@" not in cookie

    clock.now += 61
    assert tokens.validate_auth_cookie(cookie) is None


def test_tampered_or_foreign_auth_cookie_is_rejected():
    clock = Clock(1_700_000_010.0)
    tokens = TokenService("secret", clock=clock)
    login, expiration, signature = tokens.create_auth_cookie("bob").split("|")

    assert tokens.validate_auth_cookie(f"alice|{expiration}|{signature}") is None
    assert tokens.validate_auth_cookie(f"{login}|{int(expiration) + 10}|{signature}") is None
    assert TokenService("other", clock=clock).validate_auth_cookie(f"{login}|{expiration}|{signature}") is None
    assert tokens.validate_auth_cookie("garbage") is None
    assert tokens.validate_auth_cookie(None) is None
