"""Screenshot capture for failure diagnostics.

``capture`` never raises: a screenshot is only ever taken while a test is
already failing, and an error here must not replace the original failure.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path

from .exceptions import ScreenshotError

logger = logging.getLogger("gymguard.screenshot")

SCREENSHOTS_DIR = Path("screenshots")
DEFAULT_NAME = "screenshot"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_name(name: str | None) -> str:
    """Replace filesystem-unsafe characters; empty names become ``screenshot``."""
    if not name:
        return DEFAULT_NAME
    return _UNSAFE_CHARS.sub("_", name)


def build_screenshot_name(name: str | None, now: datetime | None = None) -> str:
    """Return ``<name>-YYYYMMDD-HHmmssSSS.png`` using local time."""
    moment = now or datetime.now()
    timestamp = moment.strftime("%Y%m%d-%H%M%S") + f"{moment.microsecond // 1000:03d}"
    return f"{sanitize_name(name)}-{timestamp}.png"


def capture(
    session,
    name: str | None = None,
    *,
    output_dir: Path | str = SCREENSHOTS_DIR,
    timeout_seconds: float | None = None,
) -> str | None:
    """Save a PNG of *session*'s current page and return the written path.

    Returns ``None`` when the session is missing, cannot produce images, or
    anything goes wrong along the way.
    """
    if session is None or not getattr(session, "can_screenshot", False):
        return None
    try:
        raw = session.screenshot(timeout_seconds)
        if not isinstance(raw, (bytes, bytearray)):
            raise ScreenshotError(f"expected image bytes, got {type(raw).__name__}")
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / build_screenshot_name(name)
        _write_atomic(target, bytes(raw))
    except Exception as exc:
        logger.debug("Screenshot capture failed for %s: %s", name, exc)
        return None
    return str(target)


def _write_atomic(target: Path, data: bytes) -> None:
    with tempfile.NamedTemporaryFile(
        dir=target.parent, prefix=f".{target.stem}-", suffix=".tmp", delete=False
    ) as handle:
        tmp_path = Path(handle.name)
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
