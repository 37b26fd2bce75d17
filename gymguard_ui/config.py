"""Run configuration: base URL from properties files, flags from the environment."""

from __future__ import annotations

import logging
import os
import re
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import ConfigLoadError

logger = logging.getLogger("gymguard.config")

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_IMPLICIT_WAIT_SECONDS = 5
DEFAULT_VISIBILITY_TIMEOUT_SECONDS = 10

BASE_URL_KEY = "base.url"

# Searched in order; the first file defining a non-empty base.url wins.
CANDIDATE_PATHS = ("config/application.properties", "application.properties")

_WHITESPACE = " \t\f"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one test run."""

    base_url: str
    headless: bool = False
    implicit_wait_seconds: int = DEFAULT_IMPLICIT_WAIT_SECONDS
    default_visibility_timeout_seconds: int = DEFAULT_VISIBILITY_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigLoadError("base_url must be a non-empty string")
        if self.implicit_wait_seconds < 0:
            raise ConfigLoadError(
                f"implicit_wait_seconds must be >= 0, got {self.implicit_wait_seconds}"
            )
        if self.default_visibility_timeout_seconds <= 0:
            raise ConfigLoadError(
                "default_visibility_timeout_seconds must be > 0, "
                f"got {self.default_visibility_timeout_seconds}"
            )


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java-style ``.properties`` file into a flat dict.

    Follows ``java.util.Properties.load``: keys end at the first unescaped
    ``=``, ``:`` or whitespace, ``#``/``!`` start comment lines, a trailing
    backslash continues the value on the next line, and backslash escapes
    (including ``\\uXXXX``) are decoded.  Bytes are read as UTF-8, falling
    back to ISO-8859-1.

    Raises
    ------
    ValueError
        On a malformed ``\\uXXXX`` escape.
    """
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")

    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


def _logical_lines(text: str):
    pending = ""
    continuing = False
    for natural in _LINE_BREAK.split(text):
        stripped = natural.lstrip(_WHITESPACE)
        if not continuing and (not stripped or stripped[0] in "#!"):
            continue
        line = pending + stripped
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending, continuing = line[:-1], True
            continue
        pending, continuing = "", False
        yield line
    if continuing and pending:
        yield pending


def _split_entry(line: str) -> tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:" or char in _WHITESPACE:
            break
        index += 1
    key, rest = line[:index], line[index:]
    rest = rest.lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value
    out: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char != "\\" or index + 1 >= len(value):
            out.append(char)
            index += 1
            continue
        escaped = value[index + 1]
        if escaped == "u":
            digits = value[index + 2:index + 6]
            if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
                raise ValueError(f"Malformed \\uXXXX escape: \\u{digits}")
            out.append(chr(int(digits, 16)))
            index += 6
            continue
        out.append(_ESCAPES.get(escaped, escaped))
        index += 2
    return "".join(out)


def resolve_base_url(root: Path) -> str:
    """Return the first non-empty ``base.url`` among the candidate files."""
    for relative in CANDIDATE_PATHS:
        candidate = root / relative
        if not candidate.is_file():
            continue
        try:
            url = read_properties(candidate).get(BASE_URL_KEY, "").strip()
        except (OSError, ValueError) as exc:
            logger.debug("Skipping unreadable properties file %s: %s", candidate, exc)
            continue
        if url:
            logger.debug("base.url resolved from %s", candidate)
            return url
    return DEFAULT_BASE_URL


def headless_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Return True only when the ``headless`` variable equals ``true`` (any case)."""
    env = os.environ if environ is None else environ
    raw = env.get("headless", env.get("HEADLESS", "false"))
    return raw.strip().lower() == "true"


def load_run_config(
    root: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    """Build a :class:`RunConfig` for *root* (defaults to the working directory)."""
    search_root = Path.cwd() if root is None else Path(root)
    return RunConfig(
        base_url=resolve_base_url(search_root),
        headless=headless_from_env(environ),
    )
