from __future__ import annotations

import logging
import re
from typing import Optional

import requests

from substore.core.settings import S
from substore.models import FlowInfo, FlowUsage

logger = logging.getLogger(__name__)

FLOW_HEADER = "subscription-userinfo"

_UPLOAD_RE = re.compile(r"upload=(\d+)")
_DOWNLOAD_RE = re.compile(r"download=(\d+)")
_TOTAL_RE = re.compile(r"total=(\d+)")
_EXPIRE_RE = re.compile(r"expire=(\d+)")


class FlowHeaderError(ValueError):
    pass


def get_flow_headers(url: str, *, timeout: Optional[float] = None, user_agent: Optional[str] = None) -> Optional[str]:
    """Return the provider's ``subscription-userinfo`` header, or None if it sends none.

    HEAD first; some providers only attach the header to GET responses,
    and some drop HEAD connections outright.  Failures of the GET
    (network errors, non-2xx) raise ``requests.RequestException``.
    """
    headers = {"User-Agent": user_agent or S.flow_user_agent}
    timeout = S.flow_timeout_seconds if timeout is None else timeout

    try:
        r = requests.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        value = r.headers.get(FLOW_HEADER) if r.ok else None
    except requests.RequestException as exc:
        logger.debug("HEAD %s failed, retrying with GET: %s", url, exc)
        value = None
    if value:
        return value

    r = requests.get(url, headers=headers, timeout=timeout, stream=True)
    try:
        r.raise_for_status()
        value = r.headers.get(FLOW_HEADER)
    finally:
        r.close()
    return value or None


def _required(pattern: re.Pattern, raw: str, field: str) -> int:
    m = pattern.search(raw)
    if not m:
        raise FlowHeaderError(f"flow header missing {field}")
    return int(m.group(1))


def parse_flow_headers(raw: str) -> FlowInfo:
    if not isinstance(raw, str):
        raise FlowHeaderError(f"flow header must be a string, got {type(raw).__name__}")
    # unit is KB; expire is an optional unix timestamp
    upload = _required(_UPLOAD_RE, raw, "upload")
    download = _required(_DOWNLOAD_RE, raw, "download")
    total = _required(_TOTAL_RE, raw, "total")
    m = _EXPIRE_RE.search(raw)
    expires = int(m.group(1)) if m else None
    return FlowInfo(expires=expires, total=total, usage=FlowUsage(upload=upload, download=download))
