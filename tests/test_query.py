# tests/test_query.py

from __future__ import annotations

import pytest

from todo_tracker.core.models import SortField, SortOrder
from todo_tracker.core.query import (
    ListParams,
    apply_list_query,
    filter_by_category,
    filter_by_search,
    paginate,
    sort_todos,
)

from .conftest import make_todo


def _numbered(n: int) -> list[dict]:
    return [
        make_todo(f"{i:03d}", f"Task {i}", created=f"2024-01-{(i % 28) + 1:02d}T00:00:{i % 60:02d}.000Z")
        for i in range(n)
    ]


def test_from_query_defaults() -> None:
    params = ListParams.from_query({})
    assert params == ListParams(
        search="",
        category_id="",
        sort_by=SortField.CREATED,
        sort_order=SortOrder.DESC,
        page=1,
        limit=10,
    )


@pytest.mark.parametrize("raw", ["abc", "0", "-3", "", "1.5"])
def test_from_query_bad_page_and_limit_fall_back(raw: str) -> None:
    params = ListParams.from_query({"page": raw, "limit": raw})
    assert params.page == 1
    assert params.limit == 10


def test_from_query_parses_values() -> None:
    params = ListParams.from_query(
        {"page": "3", "limit": "5", "sortBy": "task", "sortOrder": "asc",
         "search": "buy", "categoryId": "work"}
    )
    assert params.page == 3
    assert params.limit == 5
    assert params.sort_by is SortField.TASK
    assert params.sort_order is SortOrder.ASC
    assert params.search == "buy"
    assert params.category_id == "work"


def test_from_query_unknown_sort_values() -> None:
    params = ListParams.from_query({"sortBy": "priority", "sortOrder": "sideways"})
    assert params.sort_by is SortField.CREATED
    assert params.sort_order is SortOrder.DESC


def test_search_is_case_insensitive_substring() -> None:
    todos = [
        make_todo("1", "Buy groceries for dinner"),
        make_todo("2", "Finish project report"),
        make_todo("3", "Buy birthday gift"),
    ]
    result = filter_by_search(todos, "buy")
    assert [t["task"] for t in result] == ["Buy groceries for dinner", "Buy birthday gift"]
    assert filter_by_search(todos, "BUY") == result


def test_empty_search_is_noop_and_idempotent() -> None:
    todos = _numbered(7)
    assert filter_by_search(todos, "") == todos
    once = filter_by_search(todos, "task 1")
    assert filter_by_search(once, "") == once


def test_search_tolerates_missing_task() -> None:
    todos = [make_todo("1", "x"), {"userId": "u", "todoId": "2"}]
    assert [t["todoId"] for t in filter_by_search(todos, "x")] == ["1"]


@pytest.mark.parametrize("category", ["", "all"])
def test_category_filter_noop(category: str) -> None:
    todos = [make_todo("1", "a", category_id="work"), make_todo("2", "b", category_id="home")]
    assert filter_by_category(todos, category) == todos


def test_category_filter_exact_match() -> None:
    todos = [
        make_todo("1", "a", category_id="work"),
        make_todo("2", "b", category_id="Work"),
        make_todo("3", "c", category_id="work"),
    ]
    assert [t["todoId"] for t in filter_by_category(todos, "work")] == ["1", "3"]


def test_sort_created_compares_instants_not_strings() -> None:
    todos = [
        make_todo("a", "x", created="2024-01-01T10:00:00+02:00"),  # 08:00Z
        make_todo("b", "y", created="2024-01-01T09:00:00.000Z"),
    ]
    asc = sort_todos(todos, SortField.CREATED, SortOrder.ASC)
    assert [t["todoId"] for t in asc] == ["a", "b"]
    desc = sort_todos(todos, SortField.CREATED, SortOrder.DESC)
    assert [t["todoId"] for t in desc] == ["b", "a"]


def test_sort_unparseable_created_orders_first_ascending() -> None:
    todos = [
        make_todo("a", "x", created="2024-01-01T00:00:00.000Z"),
        make_todo("b", "y", created="not a date"),
    ]
    asc = sort_todos(todos, SortField.CREATED, SortOrder.ASC)
    assert [t["todoId"] for t in asc] == ["b", "a"]


def test_sort_by_task_and_completed() -> None:
    todos = [
        make_todo("1", "banana", completed=True),
        make_todo("2", "apple", completed=False),
        make_todo("3", "cherry", completed=True),
    ]
    by_task = sort_todos(todos, SortField.TASK, SortOrder.ASC)
    assert [t["task"] for t in by_task] == ["apple", "banana", "cherry"]

    by_completed = sort_todos(todos, SortField.COMPLETED, SortOrder.ASC)
    assert [t["todoId"] for t in by_completed] == ["2", "1", "3"]


def test_sort_ties_break_on_identity() -> None:
    todos = [make_todo(i, "same") for i in ("c", "a", "b")]
    asc = sort_todos(todos, SortField.TASK, SortOrder.ASC)
    assert [t["todoId"] for t in asc] == ["a", "b", "c"]
    desc = sort_todos(todos, SortField.TASK, SortOrder.DESC)
    assert [t["todoId"] for t in desc] == ["c", "b", "a"]


def test_paginate_25_items_by_10() -> None:
    todos = _numbered(25)

    first = paginate(todos, 1, 10)
    assert len(first.items) == 10
    assert first.pagination.total == 25
    assert first.pagination.total_pages == 3
    assert first.pagination.has_next is True
    assert first.pagination.has_prev is False

    last = paginate(todos, 3, 10)
    assert len(last.items) == 5
    assert last.pagination.has_next is False
    assert last.pagination.has_prev is True


def test_out_of_range_page_is_empty_but_has_prev() -> None:
    page = paginate(_numbered(3), 5, 10)
    assert page.items == []
    assert page.pagination.has_prev is True
    assert page.pagination.has_next is False


def test_empty_result_has_zero_pages() -> None:
    page = paginate([], 1, 10)
    assert page.pagination.total == 0
    assert page.pagination.total_pages == 0
    assert page.pagination.has_next is False


@pytest.mark.parametrize("total,limit", [(0, 3), (1, 1), (9, 3), (10, 3), (25, 10), (7, 20)])
def test_pages_concatenate_to_full_sequence(total: int, limit: int) -> None:
    todos = sort_todos(_numbered(total), SortField.CREATED, SortOrder.DESC)
    collected: list[dict] = []
    page_no = 1
    while True:
        page = paginate(todos, page_no, limit)
        collected.extend(page.items)
        assert page.pagination.has_next == (page_no * limit < total)
        assert page.pagination.has_prev == (page_no > 1)
        if not page.pagination.has_next:
            break
        page_no += 1
    assert collected == todos


def test_apply_list_query_runs_full_pipeline() -> None:
    todos = [
        make_todo("1", "Buy milk", category_id="shopping", created="2024-01-01T00:00:00.000Z"),
        make_todo("2", "Buy bread", category_id="shopping", created="2024-01-03T00:00:00.000Z"),
        make_todo("3", "Buy a desk", category_id="work", created="2024-01-02T00:00:00.000Z"),
        make_todo("4", "Walk dog", category_id="shopping", created="2024-01-04T00:00:00.000Z"),
    ]
    params = ListParams(search="buy", category_id="shopping", page=1, limit=1)
    page = apply_list_query(todos, params)
    assert [t["todoId"] for t in page.items] == ["2"]
    assert page.pagination.total == 2
    assert page.pagination.total_pages == 2
    assert page.pagination.has_next is True
