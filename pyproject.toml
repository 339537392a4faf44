[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lastfm"
version = "1.0.0"
description = "Client helpers for the Last.fm web services: request signing, URLs, HTTP dates, data directories and MP3 MusicBrainz IDs."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["lastfm", "audioscrobbler", "musicbrainz", "id3", "web services"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lastfm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
