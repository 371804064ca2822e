from __future__ import annotations

import logging

import httpx

from ..core.config import Settings
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)


async def fetch_faculty_load(
    settings: Settings,
    school: str,
    department: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Fetch the external schedule page as-is; the HTML is never parsed here."""
    if not settings.faculty_load_url:
        raise UpstreamError("Faculty load source is not configured")

    params = {"school": school, "department": department}
    try:
        async with httpx.AsyncClient(timeout=settings.faculty_load_timeout_seconds, transport=transport) as client:
            resp = await client.get(settings.faculty_load_url, params=params)
            resp.raise_for_status()
    except httpx.TimeoutException:
        logger.warning("Faculty load source timed out: school=%s department=%s", school, department)
        raise UpstreamError("Faculty load source timed out")
    except httpx.HTTPError as exc:
        logger.warning("Faculty load fetch failed: %s", exc)
        raise UpstreamError("Failed to fetch faculty load")
    return resp.text
