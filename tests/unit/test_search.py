"""Tests for the listing search query."""

from datetime import datetime

import pytest

from jobboard.errors import InvalidInput
from jobboard.services.search import search_listings


def test_third_page_of_twenty_five(db, make_job):
    for _ in range(25):
        make_job()

    result = search_listings(db, page_size=10, page_number=3)

    assert len(result.rows) == 5
    assert result.total_count == 25
    assert result.total_pages == 3


def test_no_match_is_empty_not_an_error(db, make_job):
    make_job(title="Barista", description="<p>coffee</p>")

    result = search_listings(db, term="engineer", page_size=10, page_number=1)

    assert result.rows == []
    assert result.total_count == 0
    assert result.page == 1


def test_page_past_the_end_keeps_total(db, make_job):
    for _ in range(3):
        make_job()

    result = search_listings(db, page_size=10, page_number=5)

    assert result.rows == []
    assert result.total_count == 3


def test_empty_table_any_page(db):
    result = search_listings(db, page_size=10, page_number=7)
    assert result.rows == []
    assert result.total_count == 0


def test_newest_first_with_id_tie_break(db, make_job):
    same = datetime(2024, 5, 1, 9, 0, 0)
    make_job(id="bbbb", created_at=same)
    make_job(id="aaaa", created_at=same)
    make_job(id="zzzz", created_at=datetime(2024, 4, 1))
    make_job(id="cccc", created_at=datetime(2024, 6, 1))

    result = search_listings(db, page_size=10, page_number=1)

    assert [r.id for r in result.rows] == ["cccc", "aaaa", "bbbb", "zzzz"]


def test_pages_cover_every_match_exactly_once(db, make_job):
    for i in range(23):
        make_job(job_type="Contract" if i % 3 else "Part-Time")

    size = 4
    first = search_listings(db, job_type="Contract", page_size=size, page_number=1)
    seen = []
    for page in range(1, first.total_pages + 1):
        result = search_listings(db, job_type="Contract", page_size=size, page_number=page)
        assert 1 <= len(result.rows) <= size
        seen.extend(r.id for r in result.rows)

    assert len(seen) == first.total_count
    assert len(set(seen)) == len(seen)


def test_same_query_twice_is_identical(db, make_job):
    for _ in range(12):
        make_job()

    a = search_listings(db, term="python", page_size=5, page_number=2)
    b = search_listings(db, term="python", page_size=5, page_number=2)

    assert a == b


def test_term_is_case_insensitive_over_title_company_description(db, make_job):
    make_job(title="Senior ENGINEER", description="")
    make_job(company_name="Engineering Co", description="")
    make_job(description="<p>We need an engineer</p>")
    make_job(title="Chef", company_name="Diner", description="<p>cooking</p>")

    result = search_listings(db, term="  Engineer ", page_size=10, page_number=1)

    assert result.total_count == 3


def test_term_folds_non_ascii_case(db, make_job):
    make_job(title="Développeur Émile", description="")
    make_job(title="Developer Emile", description="")

    assert search_listings(db, term="émile", page_size=10, page_number=1).total_count == 1
    assert search_listings(db, term="DÉVELOPPEUR", page_size=10, page_number=1).total_count == 1


def test_term_matches_stored_markup(db, make_job):
    make_job(description="<p><strong>Go</strong> backend</p>")
    make_job(description="<p>Go backend</p>")

    # the description is searched as stored, tags included
    assert search_listings(db, term="strong", page_size=10, page_number=1).total_count == 1
    assert search_listings(db, term="backend", page_size=10, page_number=1).total_count == 2


def test_term_wildcards_match_literally(db, make_job):
    make_job(description="<p>100% remote</p>")
    make_job(description="<p>1000 remote</p>")
    make_job(description="<p>snake_case</p>")
    make_job(description="<p>snakescase</p>")

    assert search_listings(db, term="100%", page_size=10, page_number=1).total_count == 1
    assert search_listings(db, term="e_c", page_size=10, page_number=1).total_count == 1


def test_categorical_filters_are_exact(db, make_job):
    make_job(job_type="Full-Time", location_country="CA", location_state="ON")
    make_job(job_type="Contract", location_country="CA", location_state="BC")
    make_job(job_type="Contract", location_country="US", location_state="NY")

    assert search_listings(db, job_type="Contract", page_size=10, page_number=1).total_count == 2
    assert search_listings(db, country="CA", page_size=10, page_number=1).total_count == 2
    assert search_listings(db, country="CA", state="BC", page_size=10, page_number=1).total_count == 1
    assert search_listings(db, job_type="full-time", page_size=10, page_number=1).total_count == 0


def test_state_without_country_is_ignored(db, make_job):
    make_job(location_country="CA", location_state="ON")
    make_job(location_country="US", location_state="NY")

    result = search_listings(db, state="ON", page_size=10, page_number=1)

    assert result.total_count == 2


def test_adding_a_filter_never_widens(db, make_job):
    make_job(job_type="Contract", location_country="CA", location_state="ON", description="<p>rust</p>")
    make_job(job_type="Contract", location_country="CA", location_state="BC", description="<p>python</p>")
    make_job(job_type="Full-Time", location_country="US", location_state="NY", description="<p>python</p>")
    make_job(job_type="Part-Time", location_country="CA", location_state="ON", description="<p>python</p>", user_id="bob")

    steps = [
        {},
        {"term": "python"},
        {"term": "python", "country": "CA"},
        {"term": "python", "country": "CA", "job_type": "Contract"},
        {"term": "python", "country": "CA", "job_type": "Contract", "state": "BC"},
        {"term": "python", "country": "CA", "job_type": "Contract", "state": "BC", "owner_id": "bob"},
    ]
    counts = [search_listings(db, page_size=10, page_number=1, **kw).total_count for kw in steps]

    assert counts == sorted(counts, reverse=True)
    assert counts[0] == 4
    assert counts[-1] == 0


def test_owner_constraint_isolates_rows(db, make_job):
    for _ in range(3):
        make_job(user_id="alice")
    for _ in range(2):
        make_job(user_id="bob")

    mine = search_listings(db, owner_id="alice", page_size=10, page_number=1)
    public = search_listings(db, owner_id=None, page_size=10, page_number=1)

    assert mine.total_count == 3
    assert {r.user_id for r in mine.rows} == {"alice"}
    assert public.total_count == 5
    assert {r.user_id for r in public.rows} == {"alice", "bob"}


@pytest.mark.parametrize(
    "page_size,page_number",
    [(0, 1), (-1, 1), (10, 0), (10, -3), (1000, 1), (True, 1), (10, True)],
)
def test_bad_pagination_is_rejected(db, page_size, page_number):
    with pytest.raises(InvalidInput):
        search_listings(db, page_size=page_size, page_number=page_number)
