"""The common interface of the web service's item types."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from xml.etree.ElementTree import Element

__all__ = ["ImageSize", "AbstractType"]


class ImageSize(enum.IntEnum):
    """Sizes of images the service provides, smallest first."""

    SMALL = 0
    MEDIUM = 1
    LARGE = 2  # roughly 174x174
    EXTRA_LARGE = 3
    MEGA = 4


class AbstractType(ABC):
    """An item (artist, album, track, ...) that can be shown, serialised and linked."""

    @abstractmethod
    def __str__(self) -> str:
        """A human-readable representation."""

    @abstractmethod
    def to_element(self) -> Element:
        """An XML element describing the item."""

    @abstractmethod
    def www(self) -> str:
        """The URL of the item's web page."""

    @abstractmethod
    def image_url(self, size: ImageSize, square: bool) -> str:
        """The URL of the item's image in the given size."""