"""proptab TUI Viewer - Main Textual app with 3-panel layout."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from proptab.reader import PropertiesReader
from proptab.table import PropertyTable
from proptab.tui.widgets import InfoPanel, KeyList, ValuePanel
from proptab.writer import encode_pair


class PropertiesViewerApp(App):
    """TUI viewer for .properties files. Keys on the left, value on the right."""

    TITLE = "proptab Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #search-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #search-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_search", "Search", show=True),
        Binding("escape", "close_search", "Close search", show=False),
        Binding("j", "next_key", "Next", show=True),
        Binding("k", "prev_key", "Prev", show=True),
    ]

    def __init__(
        self,
        path: str | Path,
        defaults: list[str] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._path = Path(path)
        self._defaults = list(defaults or [])
        self._table: PropertyTable | None = None
        self._sources: list[tuple[PropertyTable, str]] = []
        self._all_keys: list[str] = []

    def compose(self) -> ComposeResult:
        self._table = PropertiesReader.read_chain(self._path, self._defaults)
        names = [str(self._path)] + self._defaults
        self._sources = list(zip(self._table.chain(), names))
        self._all_keys = sorted(self._table.keys())

        self.title = f"proptab Viewer - {self._path.name}"

        yield Header()

        with Horizontal(id="main-area"):
            yield InfoPanel(
                path=self._path.name,
                local_count=len(self._table),
                total_count=len(self._all_keys),
                defaults=self._defaults,
                id="info",
            )
            yield KeyList(keys=self._all_keys, local=set(self._table), id="keys")
            yield ValuePanel(id="value")

        yield Input(placeholder="Search keys... (Escape to close)", id="search-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Auto-select the first key on mount."""
        if self._all_keys:
            self._show(self._all_keys[0])
            self.query_one("#keys", KeyList).focus()

    def _source_of(self, key: str) -> str:
        for table, name in self._sources:
            if key in table:
                return name
        return "(missing)"

    def _show(self, key: str) -> None:
        if not self._table:
            return
        value = self._table.get(key)
        encoded = encode_pair(key, value).decode("utf-8")
        panel = self.query_one("#value", ValuePanel)
        panel.show_value(key, value, self._source_of(key), encoded)

    def on_key_list_key_selected(self, event: KeyList.KeySelected) -> None:
        self._show(event.key)

    def action_next_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_down()

    def action_prev_key(self) -> None:
        self.query_one("#keys", KeyList).action_cursor_up()

    def action_toggle_search(self) -> None:
        """Show/hide the search bar."""
        search = self.query_one("#search-bar", Input)
        search.toggle_class("visible")
        if search.has_class("visible"):
            search.focus()
        else:
            search.value = ""
            self._update_key_list(self._all_keys)
            self.query_one("#keys", KeyList).focus()

    def action_close_search(self) -> None:
        search = self.query_one("#search-bar", Input)
        search.remove_class("visible")
        search.value = ""
        self._update_key_list(self._all_keys)
        self.query_one("#keys", KeyList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter keys as the user types."""
        if event.input.id != "search-bar":
            return
        query = event.value.lower().strip()
        if not query:
            self._update_key_list(self._all_keys)
            return
        self._update_key_list([k for k in self._all_keys if query in k.lower()])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """On Enter, match values as well as keys."""
        if event.input.id != "search-bar" or not self._table:
            return
        query = event.value.lower().strip()
        if not query:
            return
        matches = [
            k for k in self._all_keys
            if query in k.lower() or query in self._table.get(k).lower()
        ]
        self._update_key_list(matches)

    def _update_key_list(self, keys: list[str]) -> None:
        old = self.query_one("#keys", KeyList)
        local = set(self._table) if self._table else set()
        new_list = KeyList(keys=keys, local=local, id="keys")
        old.remove()
        self.query_one("#main-area", Horizontal).mount(new_list, before="#value")
        if keys:
            self._show(keys[0])


def run_viewer(path: str | Path, defaults: list[str] | None = None) -> None:
    """Launch the proptab TUI viewer."""
    path = Path(path)
    for p in [path, *(Path(d) for d in defaults or [])]:
        if not p.exists():
            print(f"Error: File not found: {p}", file=sys.stderr)
            sys.exit(1)

    app = PropertiesViewerApp(path, defaults)
    app.run()
