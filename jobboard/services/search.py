from __future__ import annotations

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..config import settings
from ..errors import InvalidInput
from ..models import Job
from ..schemas import JobOut, ResultPage

log = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


_TEXT_COLUMNS = (Job.title, Job.company_name, Job.description)


def _contains(db: Session, column, term: str):
    # matched against the stored markup as is
    if db.get_bind().dialect.name == "sqlite":
        # casefold() is registered on every sqlite connection in jobboard.db
        return func.casefold(column).like(_like_pattern(term.casefold()), escape=_LIKE_ESCAPE)
    return column.ilike(_like_pattern(term), escape=_LIKE_ESCAPE)


def _begin_snapshot(db: Session) -> None:
    # count and rows must come from the same snapshot; sqlite already
    # serialises a read transaction, postgres needs to be told
    if db.get_bind().dialect.name == "postgresql":
        db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


def build_query(
    db: Session,
    *,
    term: str = "",
    job_type: str = "",
    country: str = "",
    state: str = "",
    owner_id: str | None = None,
):
    q = db.query(Job)

    term = (term or "").strip()
    if term:
        q = q.filter(or_(*(_contains(db, col, term) for col in _TEXT_COLUMNS)))

    if job_type:
        q = q.filter(Job.job_type == job_type)

    if country:
        q = q.filter(Job.location_country == country)
        # a state without its country is meaningless
        if state:
            q = q.filter(Job.location_state == state)

    if owner_id is not None:
        q = q.filter(Job.user_id == owner_id)

    return q


def search_listings(
    db: Session,
    term: str = "",
    job_type: str = "",
    country: str = "",
    state: str = "",
    owner_id: str | None = None,
    page_size: int = settings.PAGE_SIZE,
    page_number: int = 1,
) -> ResultPage:
    """Return one page of matching listings and the total number of matches.

    Rows are ordered newest first with the id as tie-break, so paging through
    an unchanged table visits every match exactly once. A page past the end
    yields no rows but still reports the full count.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise InvalidInput(f"page_size must be a positive integer, got {page_size!r}")
    if page_size > settings.MAX_PAGE_SIZE:
        raise InvalidInput(f"page_size must not exceed {settings.MAX_PAGE_SIZE}")
    if isinstance(page_number, bool) or not isinstance(page_number, int) or page_number <= 0:
        raise InvalidInput(f"page_number must be a positive integer, got {page_number!r}")

    _begin_snapshot(db)
    try:
        base_q = build_query(
            db, term=term, job_type=job_type, country=country, state=state, owner_id=owner_id
        )
        total = base_q.count()

        rows = []
        offset = (page_number - 1) * page_size
        if offset < total:
            rows = (
                base_q.order_by(Job.created_at.desc(), Job.id.asc())
                .offset(offset)
                .limit(page_size)
                .all()
            )
        out = [JobOut.model_validate(x) for x in rows]
    finally:
        # end the read transaction so the next call sees fresh data
        db.rollback()

    log.debug(
        "search term=%r job_type=%r country=%r state=%r owner=%r page=%d size=%d -> %d/%d",
        term, job_type, country, state, owner_id, page_number, page_size, len(rows), total,
    )
    return ResultPage(
        rows=out,
        total_count=total,
        page=page_number,
        page_size=page_size,
    )
