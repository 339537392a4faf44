import threading
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import pytest

from lastfm import ws


@pytest.fixture
def creds():
    saved = (
        ws.credentials.api_key,
        ws.credentials.shared_secret,
        ws.credentials.session_key,
    )
    ws.credentials.api_key = "placeholder"
    ws.credentials.shared_secret = "secret"
    ws.credentials.session_key = ""
    yield ws.credentials
    (
        ws.credentials.api_key,
        ws.credentials.shared_secret,
        ws.credentials.session_key,
    ) = saved


@pytest.fixture
def restore_scheme():
    saved = ws.scheme()
    yield
    ws.set_scheme(saved)


class _FakeSession:
    def __init__(self):
        self.calls = []
        self.closed = False

    def get(self, target, **kwargs):
        self.calls.append(("get", target, kwargs))
        return "got"

    def post(self, target, **kwargs):
        self.calls.append(("post", target, kwargs))
        return "posted"

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    fake = _FakeSession()
    ws.set_session(fake)
    yield fake
    ws.set_session(_FakeSession())


def test_host_debug_uses_staging():
    assert ws.host(["prog", "--debug"]) == "ws.staging.audioscrobbler.com"


def test_host_override():
    assert ws.host(["prog", "--host", "example.com"]) == "example.com"


def test_host_default_and_missing_value():
    assert ws.host(["prog"]) == "ws.audioscrobbler.com"
    assert ws.host(["prog", "--host"]) == "ws.audioscrobbler.com"


def test_scheme_and_base_url(restore_scheme):
    ws.set_scheme(ws.Scheme.HTTPS)
    assert ws.scheme() is ws.Scheme.HTTPS
    assert ws.base_url().startswith("https://")
    assert ws.base_url().endswith("/2.0/")
    ws.set_scheme(ws.Scheme.HTTP)
    assert ws.base_url().startswith("http://")


def test_set_scheme_accepts_value(restore_scheme):
    ws.set_scheme("https")
    assert ws.scheme() is ws.Scheme.HTTPS
    with pytest.raises(ValueError):
        ws.set_scheme("gopher")


def test_error_codes():
    assert ws.WsError(1) is ws.WsError.NO_ERROR
    assert ws.WsError(16) is ws.WsError.TRY_AGAIN_LATER
    assert ws.WsError(23) is ws.WsError.NOT_ENOUGH_NEIGHBOURS
    assert ws.WsError(100) is ws.WsError.MALFORMED_RESPONSE
    assert ws.WsError(101) is ws.WsError.UNKNOWN_ERROR


def test_parse_error_carries_code_and_message():
    error = ws.ParseError(ws.WsError.INVALID_API_KEY, "bad key")
    assert error.error is ws.WsError.INVALID_API_KEY
    assert error.message == "bad key"
    assert str(error) == "INVALID_API_KEY: bad key"
    assert ws.ParseError(16, "later").error is ws.WsError.TRY_AGAIN_LATER


def test_sign_requires_keys(creds):
    creds.api_key = None
    with pytest.raises(RuntimeError):
        ws.sign({"method": "track.love"})


def test_sign_adds_fields_without_mutating(creds):
    params = {"method": "artist.getInfo", "artist": "Metallica"}
    signed = ws.sign(params)
    assert params == {"method": "artist.getInfo", "artist": "Metallica"}
    assert signed["api_key"] == "placeholder"
    assert len(signed["api_sig"]) == 32
    assert all(c in "0123456789abcdef" for c in signed["api_sig"])
    assert len(signed["lang"]) == 2
    assert "sk" not in signed


def test_sign_session_key(creds):
    creds.session_key = "token"
    assert ws.sign({"method": "track.love"})["sk"] == "token"
    assert "sk" not in ws.sign({"method": "track.love"}, False)


def test_signature_independent_of_order(creds):
    a = ws.sign({"a": "1", "b": "2"})
    b = ws.sign({"b": "2", "a": "1"})
    assert a["api_sig"] == b["api_sig"]


def test_signature_depends_on_secret_and_values(creds):
    first = ws.sign({"a": "1"})["api_sig"]
    assert ws.sign({"a": "2"})["api_sig"] != first
    creds.shared_secret = "password"
    assert ws.sign({"a": "1"})["api_sig"] != first


def test_url_round_trip(creds):
    target = ws.url({"method": "track.search", "track": "a b&c [x]"})
    parts = urlsplit(target)
    assert parts.path == "/2.0/"
    query = parse_qs(parts.query)
    assert query["track"] == ["a b&c [x]"]
    assert query["method"] == ["track.search"]
    assert query["api_key"] == ["placeholder"]
    keys = [item.split("=")[0] for item in parts.query.split("&")]
    assert keys == sorted(keys)


def test_get_uses_thread_session(creds, fake_session):
    assert ws.get({"method": "user.getInfo"}) == "got"
    kind, target, _ = fake_session.calls[0]
    assert kind == "get"
    assert "method=user.getInfo" in target


def test_post_sends_form(creds, fake_session):
    assert ws.post({"method": "track.love", "track": "x y"}) == "posted"
    kind, target, kwargs = fake_session.calls[0]
    assert kind == "post"
    assert target == ws.base_url()
    assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    body = kwargs["data"].decode("ascii")
    assert body.endswith("&")
    assert parse_qs(body)["track"] == ["x y"]
    assert "api_sig" in parse_qs(body)


def test_session_per_thread():
    mine = ws.session()
    assert ws.session() is mine
    other = []
    worker = threading.Thread(target=lambda: other.append(ws.session()))
    worker.start()
    worker.join()
    assert other[0] is not mine


def test_set_session_replaces_and_closes_owned():
    first = _FakeSession()
    ws.set_session(first)
    ws.set_session(None)
    assert ws.session() is first
    second = _FakeSession()
    ws.set_session(second)
    assert ws.session() is second
    assert first.closed is False


def test_parse_rfc1123():
    assert ws.parse_http_date(b"Sun, 06 Nov 1994 08:49:37 GMT") == datetime(
        1994, 11, 6, 8, 49, 37, tzinfo=timezone.utc
    )


def test_parse_rfc850():
    assert ws.parse_http_date("Sunday, 06-Nov-94 08:49:37 GMT") == datetime(
        1994, 11, 6, 8, 49, 37, tzinfo=timezone.utc
    )


def test_parse_asctime():
    assert ws.parse_http_date("Sun Nov  6 08:49:37 1994") == datetime(
        1994, 11, 6, 8, 49, 37, tzinfo=timezone.utc
    )


@pytest.mark.parametrize(
    "value",
    ["", "garbage", "Sun, 31 Feb 1994 08:49:37 GMT", "Sun, 06 Foo 1994 08:49:37 GMT"],
)
def test_parse_invalid(value):
    assert ws.parse_http_date(value) is None


def test_expires():
    class Response:
        headers = {"Expires": "Sun, 06 Nov 1994 08:49:37 GMT"}

    class Empty:
        headers = {}

    assert ws.expires(Response()) == datetime(1994, 11, 6, 8, 49, 37, tzinfo=timezone.utc)
    assert ws.expires(Empty()) is None