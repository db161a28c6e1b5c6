"""Tests for the catalogue view computation."""

import pytest

from bookmanager.catalog.schemas import Book, FilterField, QueryState, SortKey
from bookmanager.catalog.view import (
    collation_key,
    compute_view,
    count_pages,
    next_page,
    previous_page,
    refine,
    sort_books,
)


def _titles(books: list[Book]) -> list[str]:
    return [b.title for b in books]


class TestSeedScenario:
    def test_first_page_sorted_by_title(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(page_size=3))
        assert _titles(view.items) == ["1984", "Moby Dick", "Pride and Prejudice"]
        assert view.total_pages == 4
        assert view.total == 10

    def test_country_filter_is_case_insensitive(self, catalog: list[Book]) -> None:
        state = QueryState(filter_field=FilterField.COUNTRY, filter_value="usa", page_size=3)
        view = compute_view(catalog, state)
        assert view.total == 4
        assert view.total_pages == 2

        second = compute_view(catalog, next_page(state, view.total_pages))
        all_titles = set(_titles(view.items) + _titles(second.items))
        assert all_titles == {
            "The Great Gatsby",
            "To Kill a Mockingbird",
            "The Catcher in the Rye",
            "Moby Dick",
        }

    def test_sort_by_author(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(sort_key=SortKey.AUTHOR, page_size=3))
        assert [b.author for b in view.items] == [
            "F. Scott Fitzgerald",
            "Fyodor Dostoevsky",
            "George Orwell",
        ]


class TestSearchAndFilter:
    def test_search_matches_title_substring(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(search_text="THE", page_size=10))
        assert view.total == 5
        assert all("the" in b.title.lower() for b in view.items)

    def test_search_ignores_other_fields(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(search_text="Orwell", page_size=10))
        assert view.total == 0

    def test_filter_value_ignored_for_all(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(filter_value="zzz", page_size=10))
        assert view.total == 10

    def test_empty_filter_value_matches_everything(self, catalog: list[Book]) -> None:
        state = QueryState(filter_field=FilterField.LANGUAGE, filter_value="", page_size=10)
        assert compute_view(catalog, state).total == 10

    def test_year_filter_is_textual(self, catalog: list[Book]) -> None:
        state = QueryState(filter_field=FilterField.YEAR, filter_value="80", page_size=10)
        view = compute_view(catalog, state)
        assert sorted(b.id for b in view.items) == [9, 10]

    def test_negative_year_matches_sign(self, catalog: list[Book]) -> None:
        state = QueryState(filter_field=FilterField.YEAR, filter_value="-8", page_size=10)
        assert _titles(compute_view(catalog, state).items) == ["The Odyssey"]

    def test_search_then_filter(self, catalog: list[Book]) -> None:
        state = QueryState(
            search_text="the",
            filter_field=FilterField.AUTHOR,
            filter_value="tolkien",
            page_size=10,
        )
        assert _titles(compute_view(catalog, state).items) == ["The Hobbit"]

    def test_source_catalog_not_mutated(self, catalog: list[Book]) -> None:
        before = list(catalog)
        compute_view(catalog, QueryState(sort_key=SortKey.AUTHOR, page_size=10))
        assert catalog == before


class TestPagination:
    @pytest.mark.parametrize("page_size", [1, 3, 4, 7, 10, 25])
    def test_pages_cover_result_exactly_once(self, catalog: list[Book], page_size: int) -> None:
        first = compute_view(catalog, QueryState(page_size=page_size))
        collected = []
        for page in range(1, first.total_pages + 1):
            view = compute_view(catalog, QueryState(page=page, page_size=page_size))
            assert len(view.items) <= page_size
            collected.extend(view.items)
        assert collected == sort_books(catalog, SortKey.TITLE)

    def test_page_past_end_is_empty(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(page=99, page_size=3))
        assert view.items == []
        assert view.total_pages == 4
        assert view.page == 99

    def test_empty_result_has_one_page(self, catalog: list[Book]) -> None:
        view = compute_view(catalog, QueryState(search_text="no such title", page_size=3))
        assert view.items == []
        assert view.total_pages == 1

    def test_empty_catalog(self) -> None:
        view = compute_view([], QueryState())
        assert view.total == 0
        assert view.total_pages == 1

    def test_count_pages(self) -> None:
        assert count_pages(0, 3) == 1
        assert count_pages(3, 3) == 1
        assert count_pages(4, 3) == 2
        assert count_pages(10, 3) == 4


class TestSorting:
    def test_resorting_is_identity(self, catalog: list[Book]) -> None:
        for key in SortKey:
            once = sort_books(catalog, key)
            assert sort_books(once, key) == once

    def test_sort_is_stable(self, make_book) -> None:
        books = [make_book(1, title="Same"), make_book(2, title="Same"), make_book(3, title="Same")]
        assert [b.id for b in sort_books(books, SortKey.TITLE)] == [1, 2, 3]

    def test_collation_ignores_case_and_accents(self, make_book) -> None:
        books = [
            make_book(1, title="zebra"),
            make_book(2, title="Émile"),
            make_book(3, title="apple"),
            make_book(4, title="Banana"),
        ]
        assert _titles(sort_books(books, SortKey.TITLE)) == ["apple", "Banana", "Émile", "zebra"]

    def test_collation_key_tiebreak(self) -> None:
        assert collation_key("abc")[0] == collation_key("ABC")[0]
        assert collation_key("abc") != collation_key("ABC")

    def test_lowercase_sorts_before_uppercase_on_ties(self, make_book) -> None:
        books = [make_book(1, title="The Hobbit"), make_book(2, title="the hobbit")]
        assert _titles(sort_books(books, SortKey.TITLE)) == ["the hobbit", "The Hobbit"]
        assert _titles(sort_books(list(reversed(books)), SortKey.TITLE)) == ["the hobbit", "The Hobbit"]

    def test_unaccented_sorts_before_accented_on_ties(self, make_book) -> None:
        books = [make_book(1, title="émile"), make_book(2, title="emile")]
        assert _titles(sort_books(books, SortKey.TITLE)) == ["emile", "émile"]


class TestNavigation:
    def test_next_page_stops_at_last(self) -> None:
        state = QueryState(page=3)
        assert next_page(state, 4).page == 4
        assert next_page(QueryState(page=4), 4).page == 4

    def test_previous_page_stops_at_first(self) -> None:
        assert previous_page(QueryState(page=2)).page == 1
        assert previous_page(QueryState(page=1)).page == 1

    def test_refine_resets_page_on_filter_change(self) -> None:
        state = QueryState(page=3)
        assert refine(state, search_text="gatsby").page == 1
        assert refine(state, filter_field="country").page == 1
        assert refine(state, filter_value="uk").page == 1
        assert refine(state, sort_key=SortKey.AUTHOR).page == 1

    def test_refine_keeps_page_when_inputs_unchanged(self) -> None:
        state = QueryState(page=3, search_text="the")
        assert refine(state, search_text="the").page == 3
        assert refine(state, page=2).page == 2

    def test_refine_validates(self) -> None:
        with pytest.raises(ValueError):
            refine(QueryState(), filter_field="publisher")

    def test_refine_rejects_unknown_keys(self) -> None:
        state = QueryState(page=3)
        with pytest.raises(TypeError, match="pgae"):
            refine(state, pgae=2)
