"""Reading MusicBrainz track identifiers from the ID3v2 tag of an MP3 file."""

from __future__ import annotations

import io
import os
from typing import BinaryIO

__all__ = ["read_mp3_mbid", "MBID_LENGTH"]

MBID_LENGTH = 36

_MAX_SCAN = 1048576
_UFID_READ = 59
_MUSICBRAINZ_OWNER = b"http://musicbrainz.org"
_MBID_OFFSET = 23


class _Truncated(Exception):
    """The file ended before a field could be read completely."""


def _read(fp: BinaryIO, length: int) -> bytes:
    data = fp.read(length)
    if len(data) != length:
        raise _Truncated
    return data


def _synchsafe(raw: bytes) -> int:
    return (raw[0] << 21) + (raw[1] << 14) + (raw[2] << 7) + raw[3]


def _big_endian(raw: bytes) -> int:
    return int.from_bytes(raw, "big")


def _scan(fp: BinaryIO) -> str | None:
    if _read(fp, 3) != b"ID3":
        return None

    major = _read(fp, 2)[0]
    if major not in (3, 4):
        return None
    size_of = _synchsafe if major == 4 else _big_endian

    flags = _read(fp, 1)[0]
    if flags & 0x40:
        extended_size = size_of(_read(fp, 4))
        fp.seek(extended_size, io.SEEK_CUR)

    tag_size = _synchsafe(_read(fp, 4))

    while True:
        position = fp.tell()
        if position > tag_size or position > _MAX_SCAN:
            return None

        frame_id = _read(fp, 4)
        if frame_id[0] == 0:
            return None
        frame_size = size_of(_read(fp, 4))
        fp.seek(2, io.SEEK_CUR)

        if frame_id == b"UFID":
            data = _read(fp, _UFID_READ)
            if frame_size >= _UFID_READ and data.startswith(_MUSICBRAINZ_OWNER):
                raw = data[_MBID_OFFSET:_MBID_OFFSET + MBID_LENGTH]
                return raw.split(b"\0", 1)[0].decode("latin-1")
        else:
            fp.seek(frame_size, io.SEEK_CUR)


def read_mp3_mbid(path: str | os.PathLike[str]) -> str | None:
    """Return the MusicBrainz id stored in the file's UFID frame, or None.

    Raises OSError if the file cannot be opened.
    """
    with open(path, "rb") as fp:
        try:
            return _scan(fp)
        except _Truncated:
            return None