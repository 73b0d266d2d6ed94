"""proptab TUI Widgets - Custom panels for the properties viewer."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static


class InfoPanel(Static):
    """Sidebar panel showing the file and its defaults chain."""

    DEFAULT_CSS = """
    InfoPanel {
        width: 32;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    InfoPanel .info-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    InfoPanel .info-key {
        color: $text-muted;
    }
    InfoPanel .info-val {
        color: $text;
    }
    """

    def __init__(
        self,
        path: str,
        local_count: int,
        total_count: int,
        defaults: list[str],
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._path = path
        self._local_count = local_count
        self._total_count = total_count
        self._defaults = defaults

    def compose(self) -> ComposeResult:
        yield Label(self._path, classes="info-title", markup=False)
        yield Label("local keys:", classes="info-key")
        yield Label(f"  {self._local_count}", classes="info-val")
        yield Label("all keys:", classes="info-key")
        yield Label(f"  {self._total_count}", classes="info-val")
        yield Label("")  # spacer
        yield Label("defaults:", classes="info-key")
        if not self._defaults:
            yield Label("  (none)", classes="info-val")
        for name in self._defaults:
            display = name if len(name) <= 26 else "..." + name[-23:]
            yield Label(f"  {display}", classes="info-val", markup=False)


class KeyList(ListView):
    """List of keys. Supports keyboard navigation."""

    DEFAULT_CSS = """
    KeyList {
        width: 36;
        border: solid $accent;
    }
    KeyList > ListItem {
        padding: 0 1;
    }
    KeyList > ListItem.--highlight {
        background: $accent;
    }
    """

    class KeySelected(Message):
        """Fired when a key is selected."""

        def __init__(self, key: str, key_index: int) -> None:
            self.key = key
            self.key_index = key_index
            super().__init__()

    def __init__(self, keys: list[str], local: set[str], **kwargs) -> None:
        self._keys = keys
        self._local = local
        super().__init__(**kwargs)

    def compose(self) -> ComposeResult:
        for key in self._keys:
            marker = " " if key in self._local else "*"
            yield ListItem(Label(f"{marker} {key}", markup=False))

    def _post_current(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._keys):
            self.post_message(self.KeySelected(self._keys[idx], idx))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_current()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_current()


class ValuePanel(Static):
    """Shows the decoded value of a key and the record as it is encoded."""

    DEFAULT_CSS = """
    ValuePanel {
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    ValuePanel .value-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    ValuePanel .value-source {
        color: $text-muted;
        margin-bottom: 1;
    }
    ValuePanel .value-body {
        color: $text;
        margin-bottom: 1;
    }
    ValuePanel .value-encoded {
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title_widget: Label | None = None
        self._source_widget: Label | None = None
        self._body_widget: Static | None = None
        self._encoded_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a key", classes="value-title", markup=False)
        self._source_widget = Label("", classes="value-source", markup=False)
        self._body_widget = Static("", classes="value-body", markup=False)
        self._encoded_widget = Static("", classes="value-encoded", markup=False)
        yield self._title_widget
        yield self._source_widget
        yield self._body_widget
        yield self._encoded_widget

    def show_value(self, key: str, value: str, source: str, encoded: str) -> None:
        """Display one key: decoded value, where it came from, encoded form."""
        if self._title_widget:
            self._title_widget.update(f"--- {key} ---")
        if self._source_widget:
            self._source_widget.update(f"from: {source}")
        if self._body_widget:
            self._body_widget.update(value)
        if self._encoded_widget:
            self._encoded_widget.update(encoded)
        self.scroll_home()
