"""Browser state helpers and a smoke run of the Textual app."""

from __future__ import annotations

import asyncio

from shelfline.config import AppConfig
from shelfline.core.table import SortDirection, SortField
from shelfline.models.book import BookStatus, NewBook
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore
from shelfline.tui.state import BrowseState, cycle_value


def seeded_state(tmp_path, clock) -> BrowseState:
    config = AppConfig(data_dir=tmp_path, user="alice")
    store = BookStore(DocumentStore(tmp_path), clock)
    store.create(
        "alice",
        NewBook(
            title="Dune",
            author="Frank Herbert",
            status=BookStatus.FINISHED,
            reading_start_date="2023-11-01",
            reading_end_date="2023-12-01",
            tags=["sci-fi"],
        ),
    )
    store.create(
        "alice",
        NewBook(
            title="Emma",
            author="Jane Austen",
            status=BookStatus.READING,
            reading_start_date="2024-05-01",
            tags=["classic"],
        ),
    )
    state = BrowseState(config=config, clock=clock)
    state.reload()
    return state


def test_cycle_value() -> None:
    years = [2024, 2023]
    assert cycle_value(years, None) == 2024
    assert cycle_value(years, 2024) == 2023
    assert cycle_value(years, 2023) is None
    assert cycle_value(years, None, -1) == 2023
    assert cycle_value([], None) is None


def test_reload_defaults_graph_to_current_year_once(tmp_path, clock) -> None:
    state = seeded_state(tmp_path, clock)
    assert state.graph_filters.year == 2024
    assert [bar.book.title for bar in state.graph_layout().bars] == ["Emma"]

    state.show_all_years()
    state.reload()
    assert state.graph_filters.year is None
    assert len(state.graph_layout().bars) == 2


def test_graph_year_stepping(tmp_path, clock) -> None:
    state = seeded_state(tmp_path, clock)
    state.cycle_graph_year(-1)
    assert state.graph_filters.year == 2023
    state.cycle_graph_year(1)
    assert state.graph_filters.year == 2024


def test_bar_selection_stays_in_range(tmp_path, clock) -> None:
    state = seeded_state(tmp_path, clock)
    state.show_all_years()
    layout = state.graph_layout()
    assert state.bar_detail(layout).startswith("Emma\nJane Austen\n2024-05-01 - ")

    state.select_bar(1)
    state.select_bar(1)
    assert state.graph_selected == 1
    assert state.bar_detail(layout).startswith("Dune\nFrank Herbert\n2023-11-01 - 2023-12-01")

    state.select_bar(-5)
    assert state.graph_selected == 0

    state.select_bar(1)
    state.cycle_graph_year(1)
    assert state.graph_selected == 0


def test_table_sort_and_filters(tmp_path, clock) -> None:
    state = seeded_state(tmp_path, clock)
    assert [b.title for b in state.table_rows()] == ["Emma", "Dune"]  # austen, herbert

    state.sort_by("title")
    assert state.table_sort.column == SortField.TITLE
    assert state.table_sort.direction == SortDirection.DESC
    assert [b.title for b in state.table_rows()] == ["Emma", "Dune"]

    state.cycle_table_year()
    assert state.filters.year == 2024
    assert [b.title for b in state.table_rows()] == ["Emma"]
    state.cycle_table_year()
    assert state.filters.year == 2023
    state.cycle_table_year()
    assert state.filters.year is None

    state.cycle_status()
    assert state.filters.statuses == {BookStatus.FINISHED}
    assert [b.title for b in state.table_rows()] == ["Dune"]
    state.cycle_status()
    assert state.filters.statuses == {BookStatus.READING}
    state.cycle_status()
    assert state.filters.statuses == set()

    state.cycle_tag()
    assert state.filters.tags == {"classic"}
    assert [b.title for b in state.table_rows()] == ["Emma"]


def test_timeline(tmp_path, clock) -> None:
    state = seeded_state(tmp_path, clock)
    groups = state.timeline()
    # Emma is still open and lands in the latest month seen
    assert [g.month_key for g in groups] == ["2024-05", "2023-12"]


def test_app_switches_screens(tmp_path, clock) -> None:
    from shelfline.tui.app import BrowseApp
    from shelfline.tui.screens import GraphScreen, TableScreen, TimelineScreen
    from shelfline.tui.widgets import BookTable

    seeded_state(tmp_path, clock)

    async def run() -> None:
        app = BrowseApp(AppConfig(data_dir=tmp_path, user="alice"))
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, TimelineScreen)

            await pilot.press("2")
            await pilot.pause()
            assert isinstance(app.screen, TableScreen)
            assert app.screen.query_one(BookTable).row_count == 2

            await pilot.press("3")
            await pilot.pause()
            assert isinstance(app.screen, GraphScreen)

            await pilot.press("a", "down")
            await pilot.pause()
            assert app.state.graph_selected == 1

    asyncio.run(run())
