from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..errors import NotFound, Unauthorized
from ..models import Job
from ..schemas import JobIn, JobOut

log = logging.getLogger(__name__)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def create_listing(db: Session, owner_id: str, data: JobIn) -> JobOut:
    if not owner_id:
        raise Unauthorized("an authenticated principal is required to post a listing")

    job = Job(user_id=owner_id, **data.model_dump())
    db.add(job)
    _commit(db)
    db.refresh(job)
    log.info("listing %s created by %s", job.id, owner_id)
    return JobOut.model_validate(job)


def get_listing(db: Session, listing_id: str) -> JobOut:
    job = db.query(Job).filter(Job.id == listing_id).first()
    if not job:
        raise NotFound(f"listing {listing_id} not found")
    return JobOut.model_validate(job)


def _rejected(db: Session, listing_id: str, principal_id: str, action: str):
    """Explain why an owner-guarded write touched no row."""
    exists = db.query(Job.id).filter(Job.id == listing_id).first()
    if not exists:
        return NotFound(f"listing {listing_id} not found")
    log.warning("%s of listing %s rejected for principal %s", action, listing_id, principal_id)
    return Unauthorized(f"listing {listing_id} is not owned by the current user")


def update_listing(db: Session, listing_id: str, principal_id: str, data: JobIn) -> JobOut:
    if not principal_id:
        raise Unauthorized("an authenticated principal is required")

    values = data.model_dump()
    changed = (
        db.query(Job)
        .filter(Job.id == listing_id, Job.user_id == principal_id)
        .update(values, synchronize_session=False)
    )
    if changed == 0:
        db.rollback()
        raise _rejected(db, listing_id, principal_id, "update")
    _commit(db)
    log.info("listing %s updated by %s", listing_id, principal_id)
    return get_listing(db, listing_id)


def delete_listing(db: Session, listing_id: str, principal_id: str) -> None:
    if not principal_id:
        raise Unauthorized("an authenticated principal is required")

    deleted = (
        db.query(Job)
        .filter(Job.id == listing_id, Job.user_id == principal_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        db.rollback()
        raise _rejected(db, listing_id, principal_id, "delete")
    _commit(db)
    log.info("listing %s deleted by %s", listing_id, principal_id)
