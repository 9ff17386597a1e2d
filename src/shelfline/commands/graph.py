"""Graph command implementation: reading intervals drawn in the terminal."""

from rich.console import Console, Group
from rich.markup import escape
from rich.text import Text

from shelfline.config import AppConfig
from shelfline.core.dates import Clock, utc_now
from shelfline.core.graph import STATUS_COLORS, layout_graph, month_ticks, select_graph_books
from shelfline.core.table import FilterState, default_year
from shelfline.models.views import GraphLayout
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore

BAR_CHAR = "█"
DEFAULT_WIDTH = 60


def render_axis(layout: GraphLayout, width: int) -> Text:
    """Month tick labels under the chart, skipping ones that would overlap."""
    axis = [" "] * (width + 12)
    next_free = 0
    for tick in month_ticks(layout):
        position = int(layout.scale(tick, width))
        label = tick.strftime("%b %Y")
        if position < next_free or position + len(label) > len(axis):
            continue
        axis[position : position + len(label)] = label
        next_free = position + len(label) + 1
    return Text("".join(axis).rstrip(), style="dim")


def render_graph(
    layout: GraphLayout,
    width: int = DEFAULT_WIDTH,
    selected: int | None = None,
) -> Group:
    """One line per bar: offset, colored bar, then the title label.

    The label of the bar at index ``selected`` is highlighted.
    """
    lines: list[Text] = []
    for index, bar in enumerate(layout.bars):
        x0 = int(layout.scale(bar.start, width))
        x1 = max(x0 + 1, round(layout.scale(bar.end, width)))
        line = Text(" " * x0)
        line.append(BAR_CHAR * (x1 - x0), style=bar.color)
        line.append(bar.label, style="reverse" if index == selected else "")
        line.append(f"  ({bar.duration_days}d)", style="dim")
        lines.append(line)

    lines.append(Text("─" * width, style="dim"))
    lines.append(render_axis(layout, width))

    legend = Text()
    for status, color in STATUS_COLORS.items():
        legend.append(BAR_CHAR, style=color)
        legend.append(f" {status.value}  ")
    lines.append(legend)
    return Group(*lines)


def execute_graph(
    config: AppConfig,
    console: Console,
    filters: FilterState,
    show_all: bool = False,
    width: int = DEFAULT_WIDTH,
    clock: Clock = utc_now,
) -> None:
    """Execute the graph command.

    Without an explicit date filter the current year is shown, if any book
    was read in it; ``show_all`` disables that default.
    """
    store = BookStore(DocumentStore(config.data_dir))
    books = store.list_books(config.user)

    if not filters.has_date_filter and not show_all:
        year = default_year(books, clock())
        if year is not None:
            filters.set_year(year)

    layout = layout_graph(select_graph_books(books, filters, clock), clock)
    if layout is None:
        console.print("[dim]No books with a reading start date match these filters[/]")
        return

    console.print()
    active = filters.active_filters()
    if active:
        console.print(f"[dim]Showing:[/] {escape(', '.join(f.label for f in active))}")
        console.print()
    console.print(render_graph(layout, width))
    console.print()
