"""Signing, addressing and sending calls to the Last.fm web service."""

from __future__ import annotations

import enum
import locale
import re
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence
from urllib.parse import quote

import requests

from .misc import md5

__all__ = [
    "WsError",
    "Scheme",
    "ParseError",
    "Credentials",
    "credentials",
    "HOSTNAME",
    "STAGING_HOSTNAME",
    "scheme",
    "set_scheme",
    "host",
    "base_url",
    "sign",
    "url",
    "get",
    "post",
    "session",
    "set_session",
    "parse_http_date",
    "expires",
]

HOSTNAME = "ws.audioscrobbler.com"
STAGING_HOSTNAME = "ws.staging.audioscrobbler.com"

try:
    import ssl as _ssl  # noqa: F401

    _SSL_SUPPORTED = True
except ImportError:  # pragma: no cover - depends on the interpreter build
    _SSL_SUPPORTED = False


class WsError(enum.IntEnum):
    """Error codes of the web service; service numbers start at 2."""

    NO_ERROR = 1
    INVALID_SERVICE = 2
    INVALID_METHOD = 3
    AUTHENTICATION_FAILED = 4
    INVALID_FORMAT = 5
    INVALID_PARAMETERS = 6
    INVALID_RESOURCE_SPECIFIED = 7
    OPERATION_FAILED = 8
    INVALID_SESSION_KEY = 9
    INVALID_API_KEY = 10
    SERVICE_OFFLINE = 11
    SUBSCRIBERS_ONLY = 12
    RESERVED13 = 13
    TOKEN_NOT_AUTHORISED = 14
    RESERVED15 = 15
    # Transient failure on the service side; try again in a few minutes.
    TRY_AGAIN_LATER = 16
    RESERVED17 = 17
    RESERVED18 = 18
    RESERVED19 = 19
    NOT_ENOUGH_CONTENT = 20
    NOT_ENOUGH_MEMBERS = 21
    NOT_ENOUGH_FANS = 22
    NOT_ENOUGH_NEIGHBOURS = 23
    # The response was mangled on its way or by the service.
    MALFORMED_RESPONSE = 100
    # Look at the transport error: nothing to do with the service.
    UNKNOWN_ERROR = 101


class Scheme(enum.Enum):
    """URL scheme used for web service calls."""

    HTTP = "http"
    HTTPS = "https"


class ParseError(Exception):
    """A web service response could not be understood or reported an error."""

    def __init__(self, error: WsError, message: str) -> None:
        super().__init__(error, message)
        self.error = WsError(error)
        self.message = message

    def __str__(self) -> str:
        return f"{self.error.name}: {self.message}"


@dataclass
class Credentials:
    """Keys and identity used to sign calls.

    The api key and shared secret come from registering an application;
    the session key comes from authenticating a user and should be stored
    by the application.
    """

    api_key: str | None = None
    shared_secret: str | None = None
    session_key: str = ""
    username: str = ""
    user_agent: str | None = None


credentials = Credentials()

_scheme = Scheme.HTTP
_sessions: dict[int, Any] = {}
_owned: set[int] = set()
_sessions_lock = threading.Lock()


def scheme() -> Scheme:
    """The scheme in use: HTTPS only if requested and SSL is available."""
    return _scheme if _SSL_SUPPORTED else Scheme.HTTP


def set_scheme(scheme: Scheme) -> None:
    """Choose the scheme for all web service calls."""
    global _scheme
    _scheme = Scheme(scheme)


def host(argv: Sequence[str] | None = None) -> str:
    """The service host, overridable by ``--debug`` or ``--host NAME`` arguments."""
    args = list(sys.argv if argv is None else argv)
    if "--debug" in args:
        return STAGING_HOSTNAME
    if "--host" in args:
        n = args.index("--host")
        if len(args) > n + 1:
            return args[n + 1]
    return HOSTNAME


def base_url() -> str:
    """The root URL of the web service API."""
    return f"{scheme().value}://{host()}/2.0/"


def _iso639() -> str:
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    if not name or name in ("C", "POSIX"):
        return "en"
    return name[:2].lower()


def sign(params: Mapping[str, str], session_key: bool = True) -> dict[str, str]:
    """Return a copy of ``params`` with api key, language, session key and signature.

    The signature is the md5 of every key and value in key order followed by
    the shared secret.
    """
    if credentials.api_key is None or credentials.shared_secret is None:
        raise RuntimeError("the api key and shared secret must be set before calling the web service")

    signed = dict(params)
    signed["api_key"] = credentials.api_key
    signed["lang"] = _iso639()
    if session_key and credentials.session_key:
        signed["sk"] = credentials.session_key

    payload = "".join(key + value for key, value in sorted(signed.items()))
    signed["api_sig"] = md5(payload + credentials.shared_secret)
    return dict(sorted(signed.items()))


def _encode(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in params.items()
    )


def url(params: Mapping[str, str], session_key: bool = True) -> str:
    """The signed GET URL for a call; ``params`` needs a ``method`` entry."""
    return f"{base_url()}?{_encode(sign(params, session_key))}"


def get(params: Mapping[str, str]) -> Any:
    """Send a signed GET request and return the response."""
    return session().get(url(params))


def post(params: Mapping[str, str], session_key: bool = True) -> Any:
    """Sign the parameters and send them form-encoded; return the response."""
    signed = sign(params, session_key)
    body = "".join(
        f"{quote(key, safe='')}={quote(value, safe='')}&" for key, value in signed.items()
    )
    headers = {"Content-Type": "application/x-www-form-urlencoded"}
    return session().post(base_url(), data=body.encode("ascii"), headers=headers)


def _new_session() -> requests.Session:
    new = requests.Session()
    if credentials.user_agent:
        new.headers["User-Agent"] = credentials.user_agent
    return new


def session() -> Any:
    """The HTTP session of the current thread, created on first use."""
    thread = threading.get_ident()
    with _sessions_lock:
        current = _sessions.get(thread)
        if current is None:
            current = _new_session()
            _sessions[thread] = current
            _owned.add(thread)
        return current


def set_session(session: Any) -> None:
    """Use ``session`` for the current thread's calls.

    A session created here and replaced is closed. Passing back the session
    created here keeps it but stops it from being closed later.
    """
    if session is None:
        return
    thread = threading.get_ident()
    with _sessions_lock:
        old = _sessions.get(thread) if thread in _owned else None
        _owned.discard(thread)
        if old is session:
            return
        _sessions[thread] = session
    if old is not None:
        old.close()


_MONTHS = {
    name: number
    for number, name in enumerate(
        ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
        start=1,
    )
}
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_RFC1123 = re.compile(r"(\d{1,2}) ([A-Za-z]{3}) (\d{4}) (\d{2}):(\d{2}):(\d{2}) GMT")
_RFC850 = re.compile(r"(\d{1,2})-([A-Za-z]{3})-(\d{2}) (\d{2}):(\d{2}):(\d{2}) GMT")
_ASCTIME = re.compile(
    r"\s*([A-Za-z]{3})\s+([A-Za-z]{3})\s+(\d{1,2})\s+(\d{2}):(\d{2}):(\d{2})\s+(\d{4})\s*"
)


def _build(year: int, month_name: str, day: int, hh: str, mm: str, ss: str) -> datetime | None:
    month = _MONTHS.get(month_name.capitalize())
    if month is None:
        return None
    try:
        return datetime(year, month, day, int(hh), int(mm), int(ss), tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_http_date(value: bytes | str) -> datetime | None:
    """Parse an HTTP date in RFC 1123, RFC 850 or asctime form, as UTC.

    Returns None for anything that does not match one of those forms exactly.
    """
    text = value.decode("latin-1") if isinstance(value, (bytes, bytearray)) else value
    pos = text.find(",")
    if pos == -1:
        match = _ASCTIME.fullmatch(text)
        if match is None or match.group(1).capitalize() not in _WEEKDAYS:
            return None
        _, month, day, hh, mm, ss, year = match.groups()
        return _build(int(year), month, int(day), hh, mm, ss)

    rest = text[pos + 2:]
    if pos == 3:
        match = _RFC1123.fullmatch(rest)
        if match is None:
            return None
        day, month, year, hh, mm, ss = match.groups()
        return _build(int(year), month, int(day), hh, mm, ss)

    match = _RFC850.fullmatch(rest)
    if match is None:
        return None
    day, month, year, hh, mm, ss = match.groups()
    return _build(1900 + int(year), month, int(day), hh, mm, ss)


def expires(response: Any) -> datetime | None:
    """The expiry time given by a response's ``Expires`` header, or None."""
    raw = response.headers.get("Expires")
    if not raw:
        return None
    return parse_http_date(raw)