import logging
from typing import Any, Dict, Optional

import httpx
from app import config
from app.utils.http import Http

log = logging.getLogger(__name__)

# Banco Central SGS series 11: daily SELIC rate
SELIC_URL = "https://api.bcb.gov.br/dados/serie/bcdata.sgs.11/dados/ultimos/1"


async def fetch_selic(http: Optional[Http] = None) -> Dict[str, Any]:
    own = http is None
    http = http or Http()
    try:
        data = await http.get_json(SELIC_URL, params={"formato": "json"})
        latest = data[0]
        return {"success": True, "rate": float(latest["valor"]), "date": latest["data"]}
    except (httpx.HTTPError, ValueError, LookupError, TypeError) as e:
        log.warning("SELIC lookup failed (%s); using %.2f", e, config.SELIC_FALLBACK_RATE)
        return {"success": False, "rate": config.SELIC_FALLBACK_RATE, "message": "Usando taxa SELIC padrão"}
    finally:
        if own:
            await http.close()
