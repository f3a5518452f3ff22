#!/usr/bin/env python3
"""
wavtagger/tui/tagger_tui.py
Textual-based TUI for the tagging session

Features:
- Playback progress bar with elapsed/total time
- Waveform of the current file, played part highlighted
- Location / tags input panel
- "Processing" view while the batch is converted

Keybindings:
    ESC         : Quit without saving the current input
    Enter       : Save input and move on
    Left/Right  : Seek 5 seconds back/forward
    Del         : Delete the current file
    Backspace   : Delete last typed character
"""

import logging
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Header, Footer, Static
from rich.text import Text
from rich.panel import Panel
from rich.console import RenderableType

from wavtagger.errors import WavTaggerError
from wavtagger.session.commands import (
    Command,
    Quit,
    Confirm,
    InsertChar,
    Backspace,
    DeleteFile,
    SeekForward,
    SeekBackward,
)
from wavtagger.session.controller import SessionController
from wavtagger.session.state import SessionState, SubState

logger = logging.getLogger("TaggerApp")

PARTIAL_BLOCKS = " ▁▂▃▄▅▆▇"
HELP_TEXT = "ESC: Quit | Enter: Save & Next | Arrows: Seek | Del: Delete File"


def format_clock(seconds: float) -> str:
    seconds = int(max(seconds, 0))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class PlaybackGauge(Static):
    """Progress bar with mm:ss / mm:ss label"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.elapsed = 0.0
        self.duration = 0.0
        self.ratio = 0.0

    def show(self, state: SessionState):
        self.elapsed = state.playback_position
        self.duration = state.total_duration
        self.ratio = state.progress
        self.refresh()

    @property
    def label(self) -> str:
        return f"{format_clock(self.elapsed)} / {format_clock(self.duration)}"

    def render(self) -> RenderableType:
        width = max(self.size.width - 4, 10)
        label = f" {self.label}"
        bar_width = max(width - len(label), 1)
        filled = int(round(self.ratio * bar_width))
        content = Text()
        content.append("█" * filled, style="cyan")
        content.append("░" * (bar_width - filled), style="grey37")
        content.append(label, style="bold white")
        return Panel(content, title="Playback Progress", border_style="cyan")


class WaveformDisplay(Static):
    """Waveform of the current file, played part in cyan"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.waveform: tuple[int, ...] = ()
        self.progress = 0.0

    def show(self, state: SessionState):
        self.waveform = state.waveform
        self.progress = state.progress
        self.refresh()

    def render(self) -> RenderableType:
        content = Text()
        if not self.waveform:
            content.append("[no waveform]", style="dim")
            return Panel(content, title=Text("Waveform", style="bold"), border_style="white")

        columns = max(self.size.width - 4, 1)
        rows = max(self.size.height - 2, 1)
        points = len(self.waveform)
        peak = max(max(self.waveform), 1)
        played_point = int(self.progress * points)
        bars = []
        for col in range(columns):
            index = min(col * points // columns, points - 1)
            bars.append((index, self.waveform[index] / peak * rows))

        for row in range(rows):
            floor = rows - row - 1
            for index, height in bars:
                fill = height - floor
                if fill >= 1:
                    block = "█"
                elif fill > 0:
                    block = PARTIAL_BLOCKS[int(fill * len(PARTIAL_BLOCKS))]
                else:
                    block = " "
                content.append(block, style="cyan" if index < played_point else "grey50")
            if row < rows - 1:
                content.append("\n")
        return Panel(content, title=Text("Waveform", style="bold"), border_style="white")


class InputDisplay(Static):
    """Text being typed for the current prompt"""

    TITLES = {
        SubState.AWAITING_LOCATION: "Enter Location",
        SubState.AWAITING_TAGS: "Enter Tags",
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.prompt = self.TITLES[SubState.AWAITING_LOCATION]
        self.buffer_text = ""

    def show(self, state: SessionState):
        self.prompt = self.TITLES.get(state.sub_state, "")
        self.buffer_text = state.input_buffer
        self.refresh()

    def render(self) -> RenderableType:
        content = Text(self.buffer_text)
        content.append("▏", style="blink")
        return Panel(content, title=self.prompt, border_style="green")


class FileStatusDisplay(Static):
    """Which file is playing, what it has so far, last warning"""

    def show(self, state: SessionState):
        lines = Text()
        total = len(state.files)
        if state.current_file is not None:
            lines.append(f"File {state.current_index + 1}/{total}: {state.current_file}\n",
                         style="bold")
            record = state.current_metadata
            if record.location is not None:
                lines.append(f"Location: {record.location}\n")
            if record.tags:
                lines.append(f"Tags: {', '.join(record.tags)}\n")
        if state.status_message:
            lines.append(state.status_message, style="bold yellow")
        self.update(Panel(lines, title="Status", border_style="yellow"))


class TaggerApp(App):
    """Tagging session TUI Application"""

    CSS = """
    Screen {
        background: $surface;
    }

    #main-container {
        height: 100%;
        padding: 1 2;
    }

    #playback-gauge {
        height: 3;
    }

    #waveform {
        height: 12;
    }

    #input-panel {
        height: 3;
    }

    #file-status {
        height: auto;
    }

    #processing {
        height: 100%;
        content-align: center middle;
        display: none;
    }
    """

    BINDINGS = [
        Binding("escape", "quit_session", "Quit", priority=True),
        Binding("enter", "confirm", "Save & Next", priority=True),
        Binding("backspace", "backspace", "Backspace", show=False, priority=True),
        Binding("delete", "delete_file", "Delete File", priority=True),
        Binding("right", "seek_forward", "Seek +", priority=True),
        Binding("left", "seek_backward", "Seek -", priority=True),
    ]

    def __init__(self, controller: SessionController, poll_interval: float = 0.1):
        super().__init__()
        self.controller = controller
        self.poll_interval = poll_interval
        self.poll_timer = None

    def compose(self) -> ComposeResult:
        """Build UI"""
        yield Header()

        self.main_container = Vertical(id="main-container")
        with self.main_container:
            self.playback_gauge = PlaybackGauge(id="playback-gauge")
            yield self.playback_gauge

            self.waveform_display = WaveformDisplay(id="waveform")
            yield self.waveform_display

            self.input_display = InputDisplay(id="input-panel")
            yield self.input_display

            self.file_status = FileStatusDisplay(id="file-status")
            yield self.file_status

            yield Static(Panel(HELP_TEXT, title="Controls"), id="controls")

        self.processing_view = Static("Processing... Please wait", id="processing")
        yield self.processing_view

        yield Footer()

    def on_mount(self):
        """Initialize after mounting"""
        self.title = "wavtagger"
        self.refresh_view()
        self.poll_timer = self.set_interval(self.poll_interval, self.poll_player)

    def on_unmount(self):
        self.stop_polling()
        self.controller.close()

    def stop_polling(self):
        if self.poll_timer is not None:
            self.poll_timer.stop()
            self.poll_timer = None

    def finish(self, **kwargs):
        """Stop the poll timer before exit so it cannot fire into a torn down screen"""
        self.stop_polling()
        self.exit(**kwargs)

    def refresh_view(self):
        state = self.controller.state
        finalizing = state.sub_state == SubState.FINALIZING
        self.main_container.display = not finalizing
        self.processing_view.display = finalizing
        if finalizing:
            return
        self.sub_title = str(state.current_file or "")
        self.playback_gauge.show(state)
        self.waveform_display.show(state)
        self.input_display.show(state)
        self.file_status.show(state)

    def poll_player(self):
        """Sample the play head and redraw, input or not"""
        if not self.is_running or self.poll_timer is None:
            return
        if self.controller.finished or self.controller.finalize_pending:
            return
        self.controller.tick()
        self.refresh_view()

    def send_command(self, command: Command):
        try:
            self.controller.dispatch(command)
        except WavTaggerError as e:
            self.fail_session(e)
            return

        self.refresh_view()
        if self.controller.finalize_pending:
            # the processing view must be on screen before the blocking call
            self.call_after_refresh(self.run_finalizer)
        elif self.controller.finished:
            self.finish(return_code=0)

    def run_finalizer(self):
        try:
            outputs = self.controller.finalize()
        except WavTaggerError as e:
            self.fail_session(e)
            return
        self.finish(result=outputs, return_code=0,
                    message=f"Converted {len(outputs)} files")

    def fail_session(self, error: WavTaggerError):
        logger.error("session failed: %s", error)
        self.finish(return_code=1, message=f"{type(error).__name__}: {error}")

    def on_key(self, event: events.Key):
        if event.is_printable and event.character:
            event.stop()
            self.send_command(InsertChar(event.character))

    def action_quit_session(self):
        """Quit without saving the current input"""
        self.send_command(Quit())

    def action_confirm(self):
        self.send_command(Confirm())

    def action_backspace(self):
        self.send_command(Backspace())

    def action_delete_file(self):
        self.send_command(DeleteFile())

    def action_seek_forward(self):
        self.send_command(SeekForward())

    def action_seek_backward(self):
        self.send_command(SeekBackward())
