import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import config
from app.schemas import ScrapeRequest, ScrapeResponse
from app.scraper import scrape_property
from app.selic import fetch_selic

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
log = logging.getLogger("imovelpro")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.GOOGLE_MAPS_API_KEY:
        log.info("Google Maps API key configured")
    else:
        log.warning("GOOGLE_MAPS_API_KEY not set: default coordinates and mock amenities will be used")
    yield


app = FastAPI(title="ImóvelPro Scraper API", version="0.1.0", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Requisição inválida"})


@app.get("/")
async def index():
    return {
        "message": "API ImóvelPro funcionando!",
        "endpoints": {
            "scrape": "POST /api/scrape",
            "health": "GET /api/health",
            "selic": "GET /api/selic",
        },
    }


@app.get("/api/health")
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/api/scrape", response_model=ScrapeResponse)
async def scrape(req: ScrapeRequest):
    url = (req.url or "").strip()
    if not url:
        return JSONResponse(status_code=400, content={"error": "URL é obrigatória"})
    if config.TARGET_DOMAIN not in url:
        return JSONResponse(
            status_code=400,
            content={"error": "Por favor, forneça uma URL válida do Vila Vix Imóveis"},
        )

    log.info("Scrape requested for %s", url)
    try:
        data = await scrape_property(url)
    except Exception as e:
        log.exception("Scrape failed for %s", url)
        return JSONResponse(
            status_code=500,
            content={"error": "Erro ao processar o imóvel", "message": str(e)},
        )
    return ScrapeResponse(success=True, data=data)


@app.get("/api/selic")
async def selic():
    return await fetch_selic()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
