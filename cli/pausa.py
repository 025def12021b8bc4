#!/usr/bin/env python3
"""Pausa TUI — tasks, diary and guided breathing in the terminal, powered by Textual."""

from __future__ import annotations

import re
import sys
from datetime import date

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
    TextArea,
)

from core import (
    BreathingPreset,
    BreathingSessionController,
    Feeling,
    FileKeyValueStore,
    PhaseDurations,
    configure_logging,
    create_task,
    delete_task,
    entry_for,
    get_logger,
    get_tasks_with_computed_fields,
    get_user_timezone,
    load_settings,
    make_diary_store,
    make_task_store,
    month_grid,
    month_moods,
    now_local,
    random_prompt,
    render_hints,
    save_entry,
    shift_month,
    storage_dir,
    today_str,
    toggle_completion,
    workspace_root,
)

logger = get_logger(__name__)


# ── Parsing helpers ────────────────────────────────────────────


def parse_task_line(line: str) -> dict:
    """'Math: algebra exercises @2026-10-20' -> task fields.

    The part before the first colon is the subject; an optional trailing
    '@YYYY-MM-DD' sets the due date.
    """
    data: dict = {}
    m = re.search(r"\s*@(\S+)\s*$", line)
    if m:
        data["dueDate"] = m.group(1)
        line = line[: m.start()]
    if ":" in line:
        subject, title = line.split(":", 1)
        data["subject"] = subject.strip()
        data["title"] = title.strip()
    else:
        data["title"] = line.strip()
    return data


def parse_durations(text: str) -> PhaseDurations | None:
    """'4-7-8' -> PhaseDurations (clamped); None if unparseable."""
    parts = re.findall(r"\d+", text)
    if len(parts) != 3:
        return None
    return PhaseDurations.custom(*(int(p) for p in parts))


# ── Styles ─────────────────────────────────────────────────────

CSS = """
Screen {
    layout: vertical;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 0 0 1 0;
}

.view {
    padding: 1 2;
    height: 1fr;
}

#tasks-table {
    height: 1fr;
}

#diary-text {
    height: 10;
    margin: 1 0;
}

#diary-prompt {
    text-style: italic;
}

#diary-calendar {
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

#breath-display {
    height: 9;
    content-align: center middle;
    text-align: center;
    border: tall $primary-background-darken-2;
}

.row {
    height: auto;
    margin: 1 0 0 0;
}

.row > * {
    margin: 0 1 0 0;
}
"""

_BG_STYLES = {
    "blue": "on dark_blue",
    "purple": "on purple4",
    "pink": "on deep_pink4",
}


# ── Views ──────────────────────────────────────────────────────


class TasksView(Vertical):
    """Task list: add with the input, toggle/delete the highlighted row."""

    BINDINGS = [
        Binding("space", "toggle_task", "Done/Undo"),
        Binding("delete", "delete_task", "Delete"),
    ]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = make_task_store(FileKeyValueStore(storage_dir()))

    def compose(self) -> ComposeResult:
        yield Label("Tasks", classes="section-title")
        yield Input(placeholder="Subject: task description @YYYY-MM-DD", id="task-input")
        yield DataTable(id="tasks-table", cursor_type="row")

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#tasks-table", DataTable)
        table.add_columns("", "Subject", "Task", "Due")
        self.refresh_table()

    def refresh_table(self) -> None:
        table: DataTable = self.query_one("#tasks-table", DataTable)
        table.clear()
        for t in get_tasks_with_computed_fields(self.store, today_str()):
            due = t["dueDate"] or ""
            if t["isOverdue"]:
                due += " (overdue)"
            table.add_row(
                "✔" if t["isCompleted"] else "·",
                t["subject"],
                t["title"],
                due,
                key=t["id"],
            )

    def _selected_id(self) -> str | None:
        table: DataTable = self.query_one("#tasks-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value

    @on(Input.Submitted, "#task-input")
    def _on_task_submitted(self, event: Input.Submitted) -> None:
        task, errors = create_task(self.store, parse_task_line(event.value))
        if errors:
            self.app.notify("; ".join(errors), title="Task not added", severity="warning")
            return
        event.input.value = ""
        self.refresh_table()

    def action_toggle_task(self) -> None:
        task_id = self._selected_id()
        if task_id and toggle_completion(self.store, task_id):
            self.refresh_table()

    def action_delete_task(self) -> None:
        task_id = self._selected_id()
        if task_id and delete_task(self.store, task_id):
            self.refresh_table()


class DiaryView(Vertical):
    """Today's entry editor plus a month calendar of recorded moods."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        root = workspace_root()
        self.store = make_diary_store(FileKeyValueStore(storage_dir(root)), get_user_timezone(root))
        today = date.fromisoformat(today_str(root))
        self._year, self._month = today.year, today.month

    def compose(self) -> ComposeResult:
        yield Label("Diary", classes="section-title")
        yield Static(random_prompt(), id="diary-prompt")
        yield Static(today_str(), id="diary-date")
        yield TextArea(id="diary-text")
        yield Horizontal(
            Select(
                [(f.label, f) for f in Feeling],
                prompt="Predominant feeling",
                id="diary-feeling",
            ),
            Button("Save", id="save-entry", variant="primary"),
            classes="row",
        )
        yield Horizontal(
            Button("<", id="prev-month"),
            Button(">", id="next-month"),
            classes="row",
        )
        yield Static(id="diary-calendar")

    def on_mount(self) -> None:
        existing = entry_for(self.store, date.fromisoformat(today_str()))
        if existing is not None:
            self.query_one("#diary-text", TextArea).load_text(existing.text)
            self.query_one("#diary-feeling", Select).value = existing.feeling
        self.refresh_calendar()

    def refresh_calendar(self) -> None:
        moods = month_moods(self.store, self._year, self._month)
        lines = [date(self._year, self._month, 1).strftime("%B %Y"), "Su Mo Tu We Th Fr Sa"]
        week: list[str] = []
        for day in month_grid(self._year, self._month):
            if day is None:
                week.append("  ")
            else:
                feeling = moods.get(day)
                cell = f"{day.day:2d}"
                week.append(f"[{feeling.color}]{cell}[/]" if feeling else cell)
            if len(week) == 7:
                lines.append(" ".join(week))
                week = []
        if week:
            lines.append(" ".join(week))
        legend = "  ".join(f"[{f.color}]●[/] {f.label}" for f in Feeling)
        lines += ["", legend]
        self.query_one("#diary-calendar", Static).update("\n".join(lines))

    @on(Button.Pressed, "#save-entry")
    def _on_save(self) -> None:
        text = self.query_one("#diary-text", TextArea).text
        value = self.query_one("#diary-feeling", Select).value
        feeling = value if isinstance(value, Feeling) else None
        entry, errors = save_entry(self.store, text, feeling, when=now_local())
        if errors:
            self.app.notify("; ".join(errors), title="Entry not saved", severity="warning")
            return
        self.query_one("#diary-prompt", Static).update(random_prompt())
        self.app.notify(f"Saved entry for {entry.date.date().isoformat()}", title="Diary")
        self.refresh_calendar()

    @on(Button.Pressed, "#prev-month")
    def _on_prev_month(self) -> None:
        self._year, self._month = shift_month(self._year, self._month, -1)
        self.refresh_calendar()

    @on(Button.Pressed, "#next-month")
    def _on_next_month(self) -> None:
        self._year, self._month = shift_month(self._year, self._month, 1)
        self.refresh_calendar()


class BreathingView(Vertical):
    """Guided breathing: the app's one-second interval drives tick()."""

    def __init__(self, controller: BreathingSessionController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Label("Breathing", classes="section-title")
        yield Static(id="breath-display")
        yield Horizontal(
            Select(
                [(p.label, p) for p in BreathingPreset],
                value=self.controller.preset,
                allow_blank=False,
                id="breath-preset",
            ),
            Input(
                value="-".join(str(v) for v in self.controller.durations.as_tuple()),
                placeholder="inhale-hold-exhale",
                id="breath-custom",
            ),
            Button("Start", id="breath-toggle", variant="success"),
            classes="row",
        )

    def on_mount(self) -> None:
        self.refresh_display()

    def refresh_display(self) -> None:
        state = self.controller.state
        hints = render_hints(state)
        style = _BG_STYLES.get(hints["backgroundColor"], "")
        headline = hints["phaseLabel"] if state.is_running else self.controller.preset.label
        body = f"{hints['marker']}\n\n[b]{headline}[/b]\n\n{state.seconds_remaining}"
        self.query_one("#breath-display", Static).update(f"[{style}]{body}[/]" if style else body)

        button = self.query_one("#breath-toggle", Button)
        button.label = "Stop" if state.is_running else "Start"
        button.variant = "error" if state.is_running else "success"
        self.query_one("#breath-preset", Select).disabled = state.is_running
        self.query_one("#breath-custom", Input).disabled = state.is_running

    def _apply_selection(self) -> None:
        preset = self.query_one("#breath-preset", Select).value
        if not isinstance(preset, BreathingPreset):
            return
        if preset is BreathingPreset.CUSTOM:
            durations = parse_durations(self.query_one("#breath-custom", Input).value)
            if durations is None:
                self.app.notify("Enter three numbers, e.g. 4-7-8", severity="warning")
                return
            self.controller.configure(durations)
            self.query_one("#breath-custom", Input).value = "-".join(
                str(v) for v in self.controller.durations.as_tuple()
            )
        else:
            self.controller.configure(preset)

    @on(Select.Changed, "#breath-preset")
    def _on_preset_changed(self) -> None:
        self._apply_selection()
        self.refresh_display()

    @on(Input.Submitted, "#breath-custom")
    def _on_custom_submitted(self) -> None:
        self._apply_selection()
        self.refresh_display()

    @on(Button.Pressed, "#breath-toggle")
    def _on_toggle(self) -> None:
        if self.controller.is_running:
            self.controller.stop()
        else:
            self._apply_selection()
            self.controller.start()
        self.refresh_display()


# ── Main app ───────────────────────────────────────────────────


class PausaApp(App):
    """Pausa — tasks, diary and breathing."""

    TITLE = "Pausa"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("f1", "show_view('tasks')", "Tasks"),
        Binding("f2", "show_view('diary')", "Diary"),
        Binding("f3", "show_view('breathing')", "Breathe"),
        Binding("escape", "blur_focus", "Back"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    current_view: reactive[str] = reactive("tasks")

    def __init__(self) -> None:
        super().__init__()
        settings = load_settings()
        self.breathing = BreathingSessionController(settings.breathing_selection())

    def compose(self) -> ComposeResult:
        yield Header()
        yield TasksView(id="tasks", classes="view")
        yield DiaryView(id="diary", classes="view")
        yield BreathingView(self.breathing, id="breathing", classes="view")
        yield Footer()

    def on_mount(self) -> None:
        self._switch_to(self.current_view)
        self.set_interval(1.0, self._on_tick)

    def _on_tick(self) -> None:
        if not self.breathing.is_running:
            return
        self.breathing.tick()
        self.query_one(BreathingView).refresh_display()

    def action_show_view(self, view: str) -> None:
        self._switch_to(view)

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def _switch_to(self, view: str) -> None:
        for name in ("tasks", "diary", "breathing"):
            self.query_one(f"#{name}").display = name == view
        self.current_view = view
        self.sub_title = view.capitalize()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Cannot create workspace {root}: {e}")
        print("Set PAUSA_ROOT to a writable directory.")
        sys.exit(1)

    settings = load_settings(root)
    configure_logging(settings.log_level, settings.log_json, log_file=root / "pausa.log")
    logger.info("pausa_start", root=str(root))

    app = PausaApp()
    app.run()


if __name__ == "__main__":
    main()
