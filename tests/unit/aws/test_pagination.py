"""Unit tests for the paginated collector."""

from __future__ import annotations

import pytest

from apcdeploy.aws.pagination import collect_pages
from apcdeploy.lib.errors import PaginationLimitError


class TestCollectPages:
    """Tests for collect_pages."""

    def test_collects_all_pages_in_order(self) -> None:
        """Items come back page by page, in call order."""
        pages = {
            None: (["a", "b"], "t1"),
            "t1": (["c"], "t2"),
            "t2": (["d", "e"], None),
        }
        calls: list[str | None] = []

        def fetch(token: str | None) -> tuple[list[str], str | None]:
            calls.append(token)
            return pages[token]

        result = collect_pages(fetch)

        assert result == ["a", "b", "c", "d", "e"]
        assert calls == [None, "t1", "t2"]

    def test_single_page(self) -> None:
        """One call when the first page has no token."""
        calls = []

        def fetch(token: str | None) -> tuple[list[int], str | None]:
            calls.append(token)
            return [1, 2, 3], None

        assert collect_pages(fetch) == [1, 2, 3]
        assert len(calls) == 1

    def test_empty_pages_are_followed(self) -> None:
        """An empty page with a token still leads to the next page."""
        pages = {None: ([], "t1"), "t1": (["x"], None)}

        assert collect_pages(lambda token: pages[token]) == ["x"]

    def test_empty_string_token_ends_collection(self) -> None:
        """An empty token is treated like no token."""
        assert collect_pages(lambda token: (["only"], "")) == ["only"]

    def test_error_propagates_without_partial_results(self) -> None:
        """The first error is raised; nothing is returned."""

        def fetch(token: str | None) -> tuple[list[str], str | None]:
            if token is None:
                return ["a"], "t1"
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            collect_pages(fetch)

    def test_runaway_pagination_fails_closed(self) -> None:
        """A fetch that always returns a token hits the page cap."""
        calls = []

        def fetch(token: str | None) -> tuple[list[int], str | None]:
            calls.append(token)
            return [len(calls)], f"t{len(calls)}"

        with pytest.raises(PaginationLimitError) as exc_info:
            collect_pages(fetch, operation="list_applications", max_pages=5)

        assert len(calls) == 5
        assert exc_info.value.operation == "list_applications"
        assert "5 pages" in str(exc_info.value)
