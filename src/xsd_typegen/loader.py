# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Locating and reading schema documents.

Documents are addressed by a locator: a filesystem path or an http(s) URL.
Relative import locations are resolved against the directory (or URL
directory) of the importing document.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from urllib.parse import urljoin, urlsplit

import httpx

DEFAULT_TIMEOUT = 30


def is_url(locator: str) -> bool:
    """True for http:// and https:// locators."""
    return locator.startswith(("http://", "https://"))


def cwd_from_path(locator: str) -> str:
    """Return the directory a locator lives in.

    For URLs this is the origin plus the directory part of the path:
    'https://example.com/xsd/main.xsd' -> 'https://example.com/xsd'.
    """
    if is_url(locator):
        parts = urlsplit(locator)
        return f"{parts.scheme}://{parts.netloc}{posixpath.dirname(parts.path)}"
    return os.path.dirname(locator)


def resolve_location(location: str, cwd: str | None) -> str:
    """Resolve an import location against the importing document's directory.

    URLs are returned unchanged. Paths are normalized, so the same file
    reached as './a.xsd' and 'a.xsd' gets one locator.
    """
    if is_url(location):
        return location
    if cwd and is_url(cwd) and not os.path.isabs(location):
        return urljoin(cwd.rstrip("/") + "/", location)
    if cwd:
        location = os.path.join(cwd, location)
    return os.path.normpath(location)


async def fetch_content(locator: str, timeout: int = DEFAULT_TIMEOUT) -> bytes:
    """Read a document from disk or over HTTP.

    Args:
        locator: File path or http(s) URL.
        timeout: Request timeout in seconds for URLs.

    Returns:
        Raw document bytes.

    Raises:
        FileNotFoundError: If the file does not exist.
        httpx.HTTPError: If the request fails.
    """
    if is_url(locator):
        async with httpx.AsyncClient() as client:
            response = await client.get(locator, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
            return response.content

    path = Path(locator)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {locator}")
    return path.read_bytes()
