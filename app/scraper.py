import logging
import uuid
from typing import Awaitable, Callable, Optional

from app.amenities import BEACH_LABEL, find_nearby_amenities
from app.browser import render_page
from app.geocode import geocode_address
from app.schemas import Fallback, PropertyItem
from app.scrapers.vilavix import extract_property
from app.utils.geo import calculate_beach_distance
from app.utils.http import Http

log = logging.getLogger(__name__)

Renderer = Callable[[str], Awaitable[str]]


def new_property_id() -> str:
    return f"prop_{uuid.uuid4().hex}"


async def scrape_property(url: str, *, render: Renderer = render_page, http: Optional[Http] = None) -> PropertyItem:
    """Render a listing, extract it and enrich it with location data.

    Render/extraction errors propagate; geocoding and amenity lookups fall
    back to defaults and report that through ``geocodeFallback`` and
    ``amenitiesFallback``.
    """
    log.info("Scraping %s", url)
    html = await render(url)
    extracted = extract_property(html)
    log.info(
        "Extracted %r: price=%s type=%s bedrooms=%s bathrooms=%s area=%s",
        extracted.title, extracted.price, extracted.type, extracted.bedrooms, extracted.bathrooms, extracted.area,
    )

    own = http is None
    http = http or Http()
    try:
        geo = await geocode_address(f"{extracted.address}, {extracted.neighborhood}", http=http)
        coords = geo.value
        nearby = await find_nearby_amenities(coords.lat, coords.lng, http=http)
    finally:
        if own:
            await http.close()

    amenities = nearby.value
    beach = next((a for a in amenities if a.type == BEACH_LABEL), None)
    beach_distance = beach.distanceMeters if beach else calculate_beach_distance(coords.lat, coords.lng)

    item = PropertyItem(
        **extracted.model_dump(),
        id=new_property_id(),
        url=url,
        latitude=coords.lat,
        longitude=coords.lng,
        beachDistance=beach_distance,
        amenities=amenities,
        geocodeFallback=geo.reason if isinstance(geo, Fallback) else None,
        amenitiesFallback=nearby.reason if isinstance(nearby, Fallback) else None,
    )
    log.info("Scrape of %s done: %d amenities, beach %sm", url, len(amenities), beach_distance)
    return item
