import logging
import random
import uuid
from typing import Any, Dict, List, Optional, Tuple

import httpx
from app import config
from app.schemas import AmenityItem, Enriched, Fallback, Ok
from app.utils.geo import calculate_distance
from app.utils.http import Http

log = logging.getLogger(__name__)

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"

NEARBY_RADIUS_M = 3000
BEACH_RADIUS_M = 5000
PER_CATEGORY = 3
LANGUAGE = "pt-BR"

BEACH_LABEL = "Praia"
BEACH_ICON = "🏖️"

# (places type, label, icon)
PLACE_TYPES: List[Tuple[str, str, str]] = [
    ("pharmacy", "Farmácia", "💊"),
    ("gym", "Academia", "🏋️‍♀️"),
    ("shopping_mall", "Shopping", "🛍️"),
    ("supermarket", "Supermercado", "🛒"),
    ("restaurant", "Restaurante", "🍽️"),
    ("bank", "Banco", "🏦"),
    ("hospital", "Hospital", "🏥"),
    ("school", "Escola", "🏫"),
]

# (name, label, (dlat, dlng), icon)
MOCK_AMENITIES = [
    ("Farmácia Pacheco", "Farmácia", (0.002, 0.001), "💊"),
    ("Smart Fit", "Academia", (-0.001, 0.002), "🏋️‍♀️"),
    ("Shopping Vila Velha", "Shopping", (0.005, -0.003), "🛍️"),
    ("Supermercado Extrabom", "Supermercado", (-0.002, -0.001), "🛒"),
    ("Restaurante Sabor da Terra", "Restaurante", (0.001, -0.002), "🍽️"),
    ("Praia da Costa", BEACH_LABEL, (-0.003, 0.004), BEACH_ICON),
]

_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class PlacesError(Exception):
    """A places query failed (transport error or non-OK API status)."""


def _amenity_id(prefix: str = "am") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _build_amenity(place: Dict[str, Any], lat: float, lng: float, label: str, icon: str,
                   *, address_key: str, default_address: str, prefix: str = "am") -> AmenityItem:
    loc = place["geometry"]["location"]
    plat, plng = float(loc["lat"]), float(loc["lng"])
    km = calculate_distance(lat, lng, plat, plng)
    return AmenityItem(
        id=_amenity_id(prefix),
        name=place.get("name") or label,
        type=label,
        icon=icon,
        distance=km,
        distanceMeters=round(km * 1000),
        address=place.get(address_key) or default_address,
        latitude=plat,
        longitude=plng,
        rating=place.get("rating"),
    )


async def _places_query(http: Http, url: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    try:
        data = await http.get_json(url, params=params)
    except (httpx.HTTPError, ValueError) as e:
        raise PlacesError(str(e)) from e
    if not isinstance(data, dict):
        raise PlacesError("unexpected response body")
    status = data.get("status", "OK")
    if status not in _OK_STATUSES:
        raise PlacesError(f"{status}: {data.get('error_message', '')}".rstrip(": "))
    return [p for p in (data.get("results") or []) if isinstance(p, dict)]


async def _category(http: Http, lat: float, lng: float, key: str,
                    place_type: str, label: str, icon: str) -> List[AmenityItem]:
    places = await _places_query(http, NEARBY_SEARCH_URL, {
        "location": f"{lat},{lng}",
        "radius": NEARBY_RADIUS_M,
        "type": place_type,
        "key": key,
        "language": LANGUAGE,
    })
    items = []
    for p in places:
        try:
            items.append(_build_amenity(p, lat, lng, label, icon,
                                        address_key="vicinity", default_address="Endereço não disponível"))
        except (KeyError, TypeError, ValueError):
            log.debug("Skipping %s result without geometry: %r", label, p.get("name"))
    items.sort(key=lambda a: a.distance)
    return items[:PER_CATEGORY]


async def _beach(http: Http, lat: float, lng: float, key: str) -> Optional[AmenityItem]:
    places = await _places_query(http, TEXT_SEARCH_URL, {
        "query": "praia",
        "location": f"{lat},{lng}",
        "radius": BEACH_RADIUS_M,
        "key": key,
        "language": LANGUAGE,
    })
    for p in places:
        try:
            return _build_amenity(p, lat, lng, BEACH_LABEL, BEACH_ICON,
                                  address_key="formatted_address", default_address=BEACH_LABEL,
                                  prefix="am_beach")
        except (KeyError, TypeError, ValueError):
            continue
    return None


def get_mock_amenities(lat: float, lng: float, rng: Optional[random.Random] = None) -> List[AmenityItem]:
    """Fixed named amenities around (lat, lng) with random distances, nearest first."""
    rng = rng or random.Random()
    out = []
    for name, label, (dlat, dlng), icon in MOCK_AMENITIES:
        km = round(rng.random() * 1.5 + 0.1, 1)
        out.append(AmenityItem(
            id=_amenity_id(),
            name=name,
            type=label,
            icon=icon,
            distance=km,
            distanceMeters=round(km * 1000),
            address="Vila Velha, ES",
            latitude=lat + dlat,
            longitude=lng + dlng,
        ))
    out.sort(key=lambda a: a.distance)
    return out


async def find_nearby_amenities(
    lat: float,
    lng: float,
    *,
    http: Optional[Http] = None,
    api_key: Optional[str] = None,
) -> Enriched[List[AmenityItem]]:
    """Query each category in turn plus one beach search; nearest first.

    Per-category failures are logged and skipped. If every query fails (or
    there is no API key) the mock list is returned as a ``Fallback``.
    """
    key = api_key if api_key is not None else config.GOOGLE_MAPS_API_KEY
    if not key:
        log.warning("No GOOGLE_MAPS_API_KEY; using mock amenities")
        return Fallback(get_mock_amenities(lat, lng), "missing api key")

    own = http is None
    http = http or Http()
    amenities: List[AmenityItem] = []
    errors: List[str] = []
    queries = len(PLACE_TYPES) + 1
    log.info("Searching amenities around %s,%s", lat, lng)
    try:
        for place_type, label, icon in PLACE_TYPES:
            try:
                amenities.extend(await _category(http, lat, lng, key, place_type, label, icon))
            except PlacesError as e:
                log.warning("Failed to fetch %s: %s", label, e)
                errors.append(f"{place_type}: {e}")

        try:
            beach = await _beach(http, lat, lng, key)
            if beach is not None:
                amenities.append(beach)
        except PlacesError as e:
            log.warning("Failed to fetch %s: %s", BEACH_LABEL, e)
            errors.append(f"beach: {e}")
    finally:
        if own:
            await http.close()

    if len(errors) == queries:
        log.error("All amenity queries failed; using mock amenities")
        return Fallback(get_mock_amenities(lat, lng), "; ".join(errors))

    amenities.sort(key=lambda a: a.distance)
    log.info("Found %d amenities", len(amenities))
    return Ok(amenities)
