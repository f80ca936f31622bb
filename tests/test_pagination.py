import pytest

from jobportal.services.pagination import page_args, page_links, sort_clauses
from jobportal.models import Job


@pytest.mark.parametrize("page, expected", [
    (1, {"next": {"page": 2, "limit": 10}}),
    (2, {"next": {"page": 3, "limit": 10}, "prev": {"page": 1, "limit": 10}}),
    (3, {"prev": {"page": 2, "limit": 10}}),
])
def test_links_for_25_items(page, expected):
    assert page_links(page, 10, 25) == expected


def test_exact_fit_has_no_next():
    assert page_links(1, 10, 10) == {}
    assert page_links(1, 10, 0) == {}


def test_page_args_defaults_and_caps(ctx):
    assert page_args({}) == (1, 10)
    assert page_args({"page": "3", "limit": "25"}) == (3, 25)
    assert page_args({"page": "0", "limit": "-4"}) == (1, 10)
    assert page_args({"page": "x", "limit": "5000"}) == (1, 100)


def test_sort_clauses():
    clauses = sort_clauses("-salaryMin,title,unknown", {"salaryMin": Job.salary_min, "title": Job.title}, Job.created_at)
    assert [str(c) for c in clauses] == ["job.salary_min DESC", "job.title ASC"]
    assert [str(c) for c in sort_clauses("", {}, Job.created_at)] == ["job.created_at DESC"]
