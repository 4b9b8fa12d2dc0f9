# jobboard/main.py
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Depends, Query, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from fastapi.templating import Jinja2Templates

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.engine.url import make_url

from .config import settings, JOB_TYPES
from .db import Base, engine, get_db
from .errors import JobBoardError
from .logging_config import setup_logging
from .providers.locations import get_directory
from .schemas import City, Country, JobIn, JobOut, Principal, ResultPage, Subdivision
from .services import listings
from .services.search import search_listings


BASE_DIR = Path(__file__).resolve().parent        # jobboard/
TEMPLATES_DIR = BASE_DIR / "templates"            # jobboard/templates

setup_logging("jobboard")
log = logging.getLogger(__name__)

app = FastAPI(title="Job Board")
tpl = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_principal(request: Request) -> str | None:
    value = (request.headers.get(settings.AUTH_HEADER) or "").strip()
    return value or None


def require_principal(principal: str | None = Depends(get_principal)) -> str:
    if principal is None:
        raise HTTPException(401, "authentication required")
    return principal


@app.exception_handler(JobBoardError)
async def on_jobboard_error(req: Request, exc: JobBoardError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
async def on_store_unavailable(req: Request, exc: OperationalError):
    log.warning("store unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "data store unavailable"})


@app.on_event("startup")
async def on_start():
    url = make_url(str(engine.url))
    if url.get_backend_name() == "sqlite" and url.database:
        db_path = Path(url.database).resolve()
        log.info("using SQLite at %s (exists=%s)", db_path, db_path.exists())

    Base.metadata.create_all(bind=engine)


@app.get("/", response_class=HTMLResponse)
def index(
    req: Request,
    q: str = Query(""),
    job_type: str = Query(""),
    country: str = Query(""),
    state: str = Query(""),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
):
    directory = get_directory()
    result = search_listings(
        db, term=q, job_type=job_type, country=country, state=state,
        page_size=settings.PAGE_SIZE, page_number=page,
    )
    return tpl.TemplateResponse(req, "index.html", {
        "result": result,
        "job_types": JOB_TYPES,
        "countries": directory.countries(),
        "states": directory.states(country),
        "filters": {"q": q, "job_type": job_type, "country": country, "state": state},
    })


@app.get("/api/jobs", response_model=ResultPage)
def api_jobs(
    response: Response,
    q: str = Query("", description="case-insensitive substring of title/company/description"),
    job_type: str = Query(""),
    country: str = Query(""),
    state: str = Query(""),
    mine: bool = Query(False, description="only listings owned by the caller"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    principal: str | None = Depends(get_principal),
    db: Session = Depends(get_db),
):
    owner_id = None
    if mine:
        if principal is None:
            raise HTTPException(401, "authentication required")
        owner_id = principal

    result = search_listings(
        db, term=q, job_type=job_type, country=country, state=state,
        owner_id=owner_id, page_size=page_size, page_number=page,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@app.get("/api/jobs/{listing_id}", response_model=JobOut)
def api_get_job(listing_id: str, db: Session = Depends(get_db)):
    return listings.get_listing(db, listing_id)


@app.post("/api/jobs", response_model=JobOut, status_code=201)
def api_create_job(
    payload: JobIn,
    principal: str = Depends(require_principal),
    db: Session = Depends(get_db),
):
    return listings.create_listing(db, principal, payload)


@app.put("/api/jobs/{listing_id}", response_model=JobOut)
def api_update_job(
    listing_id: str,
    payload: JobIn,
    principal: str = Depends(require_principal),
    db: Session = Depends(get_db),
):
    return listings.update_listing(db, listing_id, principal, payload)


@app.delete("/api/jobs/{listing_id}", status_code=204)
def api_delete_job(
    listing_id: str,
    principal: str = Depends(require_principal),
    db: Session = Depends(get_db),
):
    listings.delete_listing(db, listing_id, principal)
    return Response(status_code=204)


@app.get("/api/me", response_model=Principal)
def api_me(principal: str | None = Depends(get_principal)):
    return Principal(principal_id=principal)


@app.get("/api/locations/countries", response_model=list[Country])
def api_countries():
    return get_directory().countries()


@app.get("/api/locations/countries/{country}/states", response_model=list[Subdivision])
def api_states(country: str):
    return get_directory().states(country)


@app.get("/api/locations/countries/{country}/states/{state}/cities", response_model=list[City])
def api_cities(country: str, state: str):
    return get_directory().cities(country, state)
