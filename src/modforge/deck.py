"""Forge Deck - a TUI for inspecting and patching game data files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Log,
    Rule,
    Static,
)

from modforge.errors import ForgeError, OversizeWrite
from modforge.models import CarvedRecord, ReplaceProposal, StringRecord
from modforge.session import ForgeSession
from modforge.utils.binary import format_size


@dataclass
class SessionStats:
    """Snapshot of session state shown in the stats panel."""

    file_name: str = ""
    size_bytes: int = 0
    generation: int = 0
    strings: int = 0
    carved: int = 0
    pending: int = 0
    too_long: int = 0
    stale: bool = False
    status: str = "idle"

    @classmethod
    def of(cls, session: ForgeSession, status: str) -> "SessionStats":
        return cls(
            file_name=session.name,
            size_bytes=len(session.buffer),
            generation=session.buffer.generation,
            strings=len(session.strings),
            carved=len(session.carved),
            pending=len(session.translations),
            too_long=sum(1 for record in session.strings if session.too_long(record)),
            stale=(session.strings_stale and bool(session.strings))
            or (session.carved_stale and bool(session.carved)),
            status=status,
        )


class StatsPanel(Static):
    """Session statistics display."""

    def compose(self) -> ComposeResult:
        yield Static(id="stats-content")

    def on_mount(self) -> None:
        self.update_display(SessionStats())

    def update_display(self, stats: SessionStats) -> None:
        content = self.query_one("#stats-content", Static)
        status_color = {
            "idle": "dim",
            "scanning": "yellow",
            "ready": "green",
            "error": "red",
        }.get(stats.status, "white")
        stale = "  [red]stale - rescan[/]" if stats.stale else ""

        content.update(f"""[b]STATUS[/b]  [{status_color}]{stats.status.upper()}[/]

[b]FILE[/b]
  {stats.file_name or "[dim]none[/]"}
  Size        [cyan]{format_size(stats.size_bytes)}[/]
  Generation  [cyan]{stats.generation}[/]{stale}

[b]INDEX[/b]
  Strings     [blue]{stats.strings:,}[/]
  Files       [magenta]{stats.carved:,}[/]

[b]TRANSLATION[/b]
  Pending     [green]{stats.pending:,}[/]
  Too long    [red]{stats.too_long:,}[/]""")


class StringTable(DataTable):
    """Extracted strings with their pending translations."""

    def on_mount(self) -> None:
        _, _, _, self.translation_column = self.add_columns("Offset", "Bytes", "Original", "Translation")
        self.cursor_type = "row"

    def show(self, records: list[StringRecord], session: ForgeSession) -> None:
        self.clear()
        for record in records:
            self.add_row(
                f"0x{record.offset:X}",
                str(record.length),
                record.original[:60],
                self._translation_cell(record, session),
                key=str(record.offset),
            )

    def refresh_translation(self, record: StringRecord, session: ForgeSession) -> None:
        """Redraw one translation cell; rows hidden by a search are left alone."""
        if str(record.offset) not in self.rows:
            return
        self.update_cell(str(record.offset), self.translation_column, self._translation_cell(record, session))

    @staticmethod
    def _translation_cell(record: StringRecord, session: ForgeSession) -> str:
        text = session.translations.get(record.offset, "")
        if not text:
            return "[dim]--[/]"
        if session.too_long(record):
            return f"[red]{text[:60]}[/]"
        return f"[green]{text[:60]}[/]"


class CarvedTable(DataTable):
    """Carved sub-files."""

    def on_mount(self) -> None:
        self.add_columns("Name", "Kind", "Size", "Offset")
        self.cursor_type = "row"

    def show(self, records: list[CarvedRecord]) -> None:
        self.clear()
        for record in records:
            size = format_size(record.size) if record.has_known_size else "[dim]unknown[/]"
            self.add_row(
                record.display_name,
                record.kind.label,
                size,
                f"0x{record.offset:X}",
                key=str(record.id),
            )


class ConfirmOversize(ModalScreen[bool]):
    """Ask before an oversize sub-file write."""

    def __init__(self, warning: OversizeWrite) -> None:
        self.warning = warning
        super().__init__()

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label("[b red]OVERSIZE WRITE[/]")
            yield Static(
                f"{self.warning}\n\nOnly the first {self.warning.slot_size} bytes will be "
                f"written; {self.warning.overflow} bytes are dropped."
            )
            with Horizontal(id="confirm-buttons"):
                yield Button("Overwrite", id="confirm-yes", variant="error")
                yield Button("Cancel", id="confirm-no", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")


class ForgeDeck(App):
    """The ModForge deck - scan, translate, carve and repack."""

    # Messages for thread-safe communication
    class ScanFinished(Message):
        def __init__(self, what: str) -> None:
            self.what = what
            super().__init__()

    class LogMessage(Message):
        def __init__(self, message: str) -> None:
            self.message = message
            super().__init__()

    CSS = """
    #main-container {
        layout: horizontal;
        height: 100%;
    }

    #left-panel {
        width: 38;
        background: $surface-darken-1;
        border-right: solid $primary-darken-2;
        padding: 1;
    }

    #center-panel {
        width: 1fr;
        padding: 1;
    }

    #right-panel {
        width: 80;
        background: $surface-darken-1;
        border-left: solid $primary-darken-2;
        padding: 1;
    }

    StatsPanel {
        height: auto;
        padding: 1;
        background: $surface-darken-2;
        border: round $primary;
        margin-bottom: 1;
    }

    .option-row {
        layout: horizontal;
        height: 3;
    }

    .option-row Input {
        width: 1fr;
    }

    .button-row {
        layout: horizontal;
        height: 3;
        margin-bottom: 1;
    }

    .button-row Button {
        margin-right: 1;
        min-width: 10;
    }

    StringTable {
        height: 2fr;
        border: round $primary-darken-1;
    }

    CarvedTable {
        height: 1fr;
        border: round $primary-darken-1;
    }

    #hex-preview {
        height: 1fr;
        border: round $accent;
        background: $surface-darken-2;
        overflow-y: auto;
    }

    #log-panel {
        height: 12;
        border: round $primary-darken-2;
        background: $surface-darken-2;
    }

    .section-title {
        text-style: bold;
        margin-bottom: 1;
    }

    ConfirmOversize {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $error;
        background: $surface;
    }

    #confirm-buttons {
        height: 3;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("s", "scan_text", "Scan text", show=True),
        Binding("d", "deep_scan", "Deep scan", show=True),
        Binding("r", "repack", "Repack", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    TITLE = "ModForge Deck"
    SUB_TITLE = "Binary asset & text patcher"

    def __init__(self) -> None:
        super().__init__()
        self.session: ForgeSession | None = None
        self.source: Path | None = None
        self.selected_string: StringRecord | None = None
        self.selected_file: CarvedRecord | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-container"):
            with Vertical(id="left-panel"):
                yield Label("SESSION", classes="section-title")
                yield StatsPanel()
                yield Input(placeholder="Game file path...", id="path-input")
                with Horizontal(classes="option-row"):
                    yield Input(placeholder="Min length (4)", id="min-length-input", type="integer")
                    yield Input(placeholder="Charset (utf-8)", id="charset-input")
                with Horizontal(classes="button-row"):
                    yield Button("Load", id="load-btn", variant="success")
                    yield Button("Text", id="scan-text-btn")
                    yield Button("Deep", id="deep-scan-btn")
                yield Rule()
                yield Label("Translation")
                yield Input(placeholder="Text for selected string...", id="translation-input")
                yield Static("[dim]no string selected[/]", id="budget-label")
                yield Input(placeholder="Translation JSON (default next to file)", id="json-path-input")
                with Horizontal(classes="button-row"):
                    yield Button("Apply", id="apply-btn", variant="primary")
                    yield Button("Export", id="export-json-btn")
                    yield Button("Import", id="import-json-btn")
                yield Rule()
                yield Label("Sub-file")
                yield Input(placeholder="Replacement file path...", id="payload-input")
                with Horizontal(classes="button-row"):
                    yield Button("Extract", id="extract-btn")
                    yield Button("Replace", id="replace-btn", variant="warning")
                yield Rule()
                yield Button("REPACK", id="repack-btn", variant="error")

            with Vertical(id="center-panel"):
                yield Input(placeholder="Search strings...", id="search-input")
                yield StringTable(id="string-table")
                yield Label("EMBEDDED FILES", classes="section-title")
                yield CarvedTable(id="carved-table")

            with Vertical(id="right-panel"):
                yield Label("HEX (first 512 bytes)", classes="section-title")
                yield Static("[dim]No file loaded[/]", id="hex-preview")
                yield Label("LOG", classes="section-title")
                yield Log(id="log-panel", highlight=True, auto_scroll=True)

        yield Footer()

    def on_mount(self) -> None:
        self._log("Deck ready - enter a file path and press Load")

    def _log(self, message: str) -> None:
        """Add a message to the log panel."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-panel", Log).write_line(f"[{timestamp}] {message}")

    def _refresh_stats(self, status: str = "ready") -> None:
        if self.session is not None:
            self.query_one(StatsPanel).update_display(SessionStats.of(self.session, status))

    def _require_session(self) -> ForgeSession | None:
        if self.session is None:
            self._log("ERROR: load a file first")
        return self.session

    # Message handlers for thread-safe updates
    def on_forge_deck_scan_finished(self, event: ScanFinished) -> None:
        session = self.session
        if event.what == "strings":
            self._show_strings()
            self._log(f"Found {len(session.strings)} strings")
        else:
            self.query_one("#carved-table", CarvedTable).show(session.carved)
            self._log(f"Found {len(session.carved)} embedded files")
        self._refresh_stats()

    def on_forge_deck_log_message(self, event: LogMessage) -> None:
        self._log(event.message)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if self.session is None or event.row_key is None:
            return
        key = event.row_key.value
        if event.data_table.id == "string-table":
            offset = int(key)
            self.selected_string = next(
                (record for record in self.session.strings if record.offset == offset), None
            )
            self.query_one("#translation-input", Input).value = self.session.translations.get(offset, "")
        elif event.data_table.id == "carved-table":
            self.selected_file = self.session.carved[int(key)]

    def on_input_changed(self, event: Input.Changed) -> None:
        if self.session is None:
            return
        if event.input.id == "search-input":
            self._show_strings()
        elif event.input.id == "translation-input":
            self._show_budget(event.value)

    def _show_budget(self, text: str) -> None:
        """Live byte count of the edit against the selected string's slot."""
        label = self.query_one("#budget-label", Static)
        record = self.selected_string
        if record is None:
            label.update("[dim]no string selected[/]")
            return
        try:
            used = len(self.session.patcher.encode(text))
        except UnicodeEncodeError:
            label.update("[red]not encodable[/]")
            return
        color = "red" if used > record.length else "green"
        label.update(f"[{color}]{used} / {record.length} bytes[/]")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {
            "load-btn": self.action_load,
            "scan-text-btn": self.action_scan_text,
            "deep-scan-btn": self.action_deep_scan,
            "apply-btn": self.action_apply_translation,
            "export-json-btn": self.action_export_translations,
            "import-json-btn": self.action_import_translations,
            "extract-btn": self.action_extract,
            "replace-btn": self.action_replace,
            "repack-btn": self.action_repack,
        }
        action = actions.get(event.button.id)
        if action is not None:
            action()

    def _show_strings(self) -> None:
        query = self.query_one("#search-input", Input).value
        records = self.session.search_strings(query)
        self.query_one("#string-table", StringTable).show(records, self.session)
        if self.selected_string is not None and self.selected_string not in records:
            self.selected_string = None
            self._show_budget(self.query_one("#translation-input", Input).value)

    def _translation_path(self) -> Path:
        """Path from the JSON input, or ``{name}_translation.json`` beside the file."""
        typed = self.query_one("#json-path-input", Input).value.strip()
        if typed:
            return Path(typed)
        return self.source.parent / self.session.memory.document_name(self.session.name)

    def _show_hex(self) -> None:
        rows = self.session.hex_preview()
        self.query_one("#hex-preview", Static).update("\n".join(row.render() for row in rows))

    # Actions

    def action_load(self) -> None:
        path = Path(self.query_one("#path-input", Input).value.strip())
        if not path.is_file():
            self._log(f"ERROR: not a file: {path}")
            return
        try:
            self.session = ForgeSession.load(path)
        except OSError as e:
            self._log(f"ERROR: {e}")
            return
        self.source = path
        self.selected_string = self.selected_file = None
        self.query_one("#string-table", StringTable).clear()
        self.query_one("#carved-table", CarvedTable).clear()
        self._show_hex()
        self._refresh_stats()
        self._log(f"Loaded {path.name} ({format_size(len(self.session.buffer))})")

    def action_scan_text(self) -> None:
        session = self._require_session()
        if session is None:
            return
        min_length = self.query_one("#min-length-input", Input).value.strip()
        charset = self.query_one("#charset-input", Input).value.strip()
        try:
            session.configure_scanner(
                min_length=int(min_length) if min_length else None,
                charset=charset or None,
            )
        except (ForgeError, ValueError) as e:
            self._log(f"ERROR: {e}")
            return
        self._refresh_stats("scanning")
        self.run_scan("strings")

    def action_deep_scan(self) -> None:
        if self._require_session():
            self._refresh_stats("scanning")
            self.run_scan("carved")

    @work(thread=True)
    def run_scan(self, what: str) -> None:
        """Run one scanner in a background thread."""
        try:
            if what == "strings":
                self.session.scan_strings()
            else:
                self.session.carve()
        except ForgeError as e:
            self.post_message(self.LogMessage(f"ERROR: {e}"))
            return
        self.post_message(self.ScanFinished(what))

    def action_apply_translation(self) -> None:
        session = self._require_session()
        record = self.selected_string
        if session is None or record is None:
            return
        session.set_translation(record.offset, self.query_one("#translation-input", Input).value)
        self.query_one("#string-table", StringTable).refresh_translation(record, session)
        if session.too_long(record):
            self._log(f"WARNING: text at 0x{record.offset:X} exceeds {record.length} bytes and will be skipped")
        self._refresh_stats()

    def action_export_translations(self) -> None:
        session = self._require_session()
        if session is None:
            return
        try:
            path = session.export_translations(self._translation_path())
        except OSError as e:
            self._log(f"ERROR: {e}")
            return
        self._log(f"Exported {len(session.strings)} entries -> {path.name}")

    def action_import_translations(self) -> None:
        session = self._require_session()
        if session is None:
            return
        path = self._translation_path()
        try:
            count = session.import_translations(path)
        except (ForgeError, OSError) as e:
            self._log(f"ERROR: {e}")
            return
        self._show_strings()
        self._refresh_stats()
        self._log(f"Imported translations from {path.name} ({count} pending)")

    def action_extract(self) -> None:
        session = self._require_session()
        record = self.selected_file
        if session is None or record is None:
            return
        try:
            extraction = session.extract(record, self.source.parent)
        except OSError as e:
            self._log(f"ERROR: {e}")
            return
        note = " (size unknown - first 5 MB only)" if extraction.approximate else ""
        self._log(f"Extracted {record.display_name}{note}")

    def action_replace(self) -> None:
        session = self._require_session()
        record = self.selected_file
        if session is None or record is None:
            return
        payload_path = Path(self.query_one("#payload-input", Input).value.strip())
        try:
            proposal = session.propose_replace(record, payload_path.read_bytes())
        except (ForgeError, OSError) as e:
            self._log(f"ERROR: {e}")
            return

        if proposal.oversize:
            self.push_screen(
                ConfirmOversize(proposal.warning),
                lambda confirmed: self._commit_replace(proposal, confirmed),
            )
        else:
            self._commit_replace(proposal, False)

    def _commit_replace(self, proposal: ReplaceProposal, confirmed: bool) -> None:
        if proposal.oversize and not confirmed:
            self._log(f"Replace of {proposal.record.display_name} cancelled")
            return
        outcome = self.session.commit_replace(proposal, confirmed=confirmed)
        self._show_hex()
        self._refresh_stats()
        self._log(
            f"Replaced {proposal.record.display_name}: {outcome.written} bytes written, "
            f"{outcome.padded} zero-filled"
        )

    def action_repack(self) -> None:
        session = self._require_session()
        if session is None:
            return
        try:
            path, report = session.save_modded(self.source.parent)
        except (ForgeError, OSError) as e:
            self._log(f"ERROR: {e}")
            return
        self._log(f"Repacked -> {path.name}: {report.summary()}")


def main() -> None:
    """Run the Forge Deck TUI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        filename="modforge.log",
    )
    app = ForgeDeck()
    app.run()


if __name__ == "__main__":
    main()
