import logging
import re
from typing import Optional

import httpx
from app import config
from app.schemas import Coordinates, Enriched, Fallback, Ok
from app.utils.http import Http

log = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# Vila Velha, ES
DEFAULT_COORDINATES = Coordinates(lat=-20.3333, lng=-40.2833)


def qualify_address(address: str) -> str:
    """Append state/country qualifiers the address doesn't already mention."""
    parts = [p.strip() for p in (address or "").split(",") if p.strip()]
    joined = ", ".join(parts)
    for q in config.GEOCODE_QUALIFIERS:
        if not re.search(rf"\b{re.escape(q)}\b", joined, re.I):
            parts.append(q)
    return ", ".join(parts)


async def geocode_address(
    address: str,
    *,
    http: Optional[Http] = None,
    api_key: Optional[str] = None,
) -> Enriched[Coordinates]:
    """Resolve ``address`` to coordinates.

    Never raises: any failure yields ``Fallback(DEFAULT_COORDINATES, reason)``.
    """
    key = api_key if api_key is not None else config.GOOGLE_MAPS_API_KEY
    if not key:
        log.warning("No GOOGLE_MAPS_API_KEY; using default coordinates")
        return Fallback(DEFAULT_COORDINATES, "missing api key")

    query = qualify_address(address)
    log.info("Geocoding %r", query)

    own = http is None
    http = http or Http()
    try:
        data = await http.get_json(GEOCODE_URL, params={"address": query, "key": key})
    except (httpx.HTTPError, ValueError) as e:
        log.error("Geocoding failed for %r: %s", query, e)
        return Fallback(DEFAULT_COORDINATES, f"request failed: {e}")
    finally:
        if own:
            await http.close()

    if not isinstance(data, dict):
        data = {}
    results = data.get("results") or []
    if not results:
        status = data.get("status", "no results")
        log.warning("Geocoding returned no results for %r (%s); using default coordinates", query, status)
        return Fallback(DEFAULT_COORDINATES, f"no results ({status})")

    try:
        loc = results[0]["geometry"]["location"]
        coords = Coordinates(lat=float(loc["lat"]), lng=float(loc["lng"]))
    except (KeyError, TypeError, ValueError) as e:
        log.error("Malformed geocoding result for %r: %s", query, e)
        return Fallback(DEFAULT_COORDINATES, f"malformed result: {e}")

    log.info("Coordinates for %r: %s,%s", query, coords.lat, coords.lng)
    return Ok(coords)
