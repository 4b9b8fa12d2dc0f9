"""Tests for owner-guarded listing writes."""

import pytest
from pydantic import ValidationError

from jobboard.errors import NotFound, Unauthorized
from jobboard.schemas import JobIn
from jobboard.services import listings
from jobboard.services.search import search_listings


def _payload(**overrides):
    data = dict(
        title="Backend Engineer",
        company_name="Acme",
        description="<p>Build APIs</p>",
        job_type="Full-Time",
        location_country="CA",
        location_state="ON",
        location_city="Toronto",
    )
    data.update(overrides)
    return JobIn(**data)


def test_create_assigns_id_owner_and_timestamp(db):
    job = listings.create_listing(db, "alice", _payload())

    assert job.id
    assert job.user_id == "alice"
    assert job.created_at is not None
    assert listings.get_listing(db, job.id).title == "Backend Engineer"


def test_create_requires_principal(db):
    with pytest.raises(Unauthorized):
        listings.create_listing(db, "", _payload())


def test_create_sanitizes_description(db):
    job = listings.create_listing(
        db, "alice", _payload(description='<p onclick="x()">Hi<script>alert(1)</script></p>')
    )
    assert job.description == "<p>Hi</p>"


def test_get_missing_listing(db):
    with pytest.raises(NotFound):
        listings.get_listing(db, "does-not-exist")


def test_owner_can_update(db):
    job = listings.create_listing(db, "alice", _payload())

    updated = listings.update_listing(db, job.id, "alice", _payload(title="Staff Engineer"))

    assert updated.title == "Staff Engineer"
    assert updated.user_id == "alice"
    assert updated.created_at == job.created_at


def test_other_principal_cannot_update(db):
    job = listings.create_listing(db, "alice", _payload())

    with pytest.raises(Unauthorized):
        listings.update_listing(db, job.id, "mallory", _payload(title="pwned"))

    assert listings.get_listing(db, job.id).title == "Backend Engineer"


def test_update_missing_listing(db):
    with pytest.raises(NotFound):
        listings.update_listing(db, "nope", "alice", _payload())


def test_owner_can_delete(db):
    job = listings.create_listing(db, "alice", _payload())

    listings.delete_listing(db, job.id, "alice")

    with pytest.raises(NotFound):
        listings.get_listing(db, job.id)


def test_other_principal_cannot_delete(db):
    job = listings.create_listing(db, "alice", _payload())

    with pytest.raises(Unauthorized):
        listings.delete_listing(db, job.id, "mallory")

    assert search_listings(db, page_size=10, page_number=1).total_count == 1


def test_delete_missing_listing(db):
    with pytest.raises(NotFound):
        listings.delete_listing(db, "nope", "alice")


def test_unknown_job_type_rejected():
    with pytest.raises(ValidationError):
        _payload(job_type="Internship")


def test_blank_title_rejected():
    with pytest.raises(ValidationError):
        _payload(title="   ")
