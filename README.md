# lastfm

Helpers for calling the Last.fm web services (API 2.0) from Python, plus a
few utilities that a scrobbling client needs.

## Modules

### `lastfm.ws`

Request signing and sending.

- `credentials` is a `Credentials` instance that holds `api_key`,
  `shared_secret`, `session_key`, `username` and `user_agent`. The api key
  and shared secret must be set before any call is signed. If they are not,
  `sign` raises `RuntimeError`.
- `sign(params, session_key=True)` returns a new dict with `api_key`, `lang`,
  `sk` (only when `session_key` is true and a session key is set) and
  `api_sig` added. `api_sig` is the md5 of every key and value in key order,
  followed by the shared secret.
- `url(params, session_key=True)` returns the signed GET URL as a string.
- `get(params)` and `post(params, session_key=True)` send signed requests and
  return the `requests` response. `post` sends the parameters form-encoded.
- `scheme()` and `set_scheme(Scheme.HTTPS)` choose HTTP or HTTPS. HTTPS is
  used only when SSL is available.
- `host(argv=None)` returns `HOSTNAME`. If the arguments, `sys.argv` by
  default, contain `--debug`, it returns `STAGING_HOSTNAME`. If they contain
  `--host NAME`, it returns `NAME`.
- `base_url()` returns the root URL of the API.
- `session()` returns the `requests.Session` for the current thread and
  creates it on first use. `set_session(session)` replaces it. A session that
  `session()` created and that is then replaced is closed.
- `parse_http_date(value)` reads RFC 1123, RFC 850 and asctime dates. It
  returns a UTC `datetime`, or `None` when the value does not match one of
  those forms exactly.
- `expires(response)` reads the response's `Expires` header in the same way.
- `WsError` lists the service's error codes. `ParseError(error, message)` is
  the exception that carries one of them, with `.error` and `.message`.

### `lastfm.misc`

- `runtime_data_dir()`, `cache_dir()` and `logs_dir()` return per-user
  `Path`s under a `Last.fm` directory and create them if they are missing.
- `platform_name()` returns a readable name of the operating system, such as
  `"UNIX X11"`.
- `md5(data)` returns the lower-case hex digest of bytes, or of text encoded
  as UTF-8.

### `lastfm.mbid`

- `read_mp3_mbid(path)` returns the MusicBrainz track ID from the `UFID`
  frame of an ID3v2.3 or v2.4 tag. It returns `None` when the file has no such
  ID, and raises `OSError` when the file cannot be opened.

### `lastfm.abstract_type`

- `AbstractType` is an abstract base class for item types. It requires
  `__str__`, `to_element()`, `www()` and `image_url(size, square)`.
- `ImageSize` lists the image sizes, from `SMALL` to `MEGA`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from lastfm import ws

ws.credentials.api_key = "placeholder"
ws.credentials.shared_secret = "secret"

print(ws.url({"method": "artist.getInfo", "artist": "Metallica"}))
```

```python
from lastfm.mbid import read_mp3_mbid

mbid = read_mp3_mbid("song.mp3")
```

## What it does not do

The package signs and sends requests, but it does not interpret what comes
back. It has no concrete artist, album, track or user types and no parsing of
response XML. It also does not authenticate a user for you: obtain a session
key yourself and assign it to `ws.credentials.session_key`. It has no
network-connection monitoring and no proxy detection beyond what `requests`
does on its own.