from __future__ import annotations

import argparse
import logging
import queue
import tkinter as tk
from pathlib import Path
from tkinter import ttk

from PIL import Image, ImageEnhance, ImageOps, ImageTk

from . import __version__
from .config import Settings, load_settings
from .decay import WritingSession, full_step
from .models import DecayStep, Writing
from .paths import asset_path, settings_path, writings_directory
from .storage import WritingStore, WritingStoreError, trim_text
from .ticker import KeystrokeMonitor

logger = logging.getLogger(__name__)

WINDOW_BG = "#141414"
PANEL_BG = "#1e1e1e"
TEXT_FG = "#f2eee8"
MUTED_FG = "#8c8680"
LIFE_BAR_HEIGHT = 20
BACKGROUND_BRIGHTNESS = 0.4
PLACEHOLDER = "Write something..."


class AnkyApp(tk.Tk):
    def __init__(self, settings: Settings, store: WritingStore):
        super().__init__()
        self.title("anky")
        self.geometry(f"{settings.window_width}x{settings.window_height}")
        self.minsize(480, 400)
        self.configure(bg=WINDOW_BG)

        self.settings = settings
        self.store = store
        self.session = WritingSession(settings.decay_seconds)
        self.monitor = KeystrokeMonitor(self.session, store, settings.tick_seconds)
        self.events: queue.Queue[tuple[str, object]] = queue.Queue()

        self._background_source = self._read_background(settings.background_image)
        self._background_photo: ImageTk.PhotoImage | None = None
        self._background_size = (0, 0)
        self._current_step = full_step()
        self._writing_buttons: list[tk.Widget] = []

        self.percentage_var = tk.StringVar(value="100%")
        self.detail_title_var = tk.StringVar(value="")

        self._configure_style()
        self._build_shell()
        self._show_view("write")

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.bind("<Configure>", self._on_resize, add="+")
        self.after(250, self._drain_events)

    @staticmethod
    def _read_background(filename: str) -> Image.Image | None:
        if not filename:
            return None
        path = asset_path(filename)
        if not path.exists():
            logger.info("Background image %s not found, using plain background", filename)
            return None
        try:
            return Image.open(path).convert("RGB")
        except OSError as exc:
            logger.error("Failed to load background image %s: %s", path, exc)
            return None

    def _configure_style(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass
        style.configure("TButton", padding=(12, 6), background="#2a2a2a", foreground=TEXT_FG, bordercolor="#3a3a3a")
        style.map("TButton", background=[("active", "#3a3a3a"), ("disabled", "#1f1f1f")], foreground=[("disabled", "#5a5a5a")])
        style.configure("Vertical.TScrollbar", background="#2a2a2a", troughcolor=PANEL_BG, bordercolor=PANEL_BG)

    def _build_shell(self) -> None:
        self.background_canvas = tk.Canvas(self, bg=WINDOW_BG, highlightthickness=0, bd=0)
        self.background_canvas.place(x=0, y=0, relwidth=1, relheight=1)

        self._build_top_bar()

        # The background stays visible around the centered column.
        self.content = tk.Frame(self, bg=WINDOW_BG, bd=0)
        self.content.place(relx=0.5, rely=0.54, anchor="center", relwidth=0.72, relheight=0.8)
        self.content.columnconfigure(0, weight=1)
        self.content.rowconfigure(0, weight=1)

        self.views: dict[str, tk.Frame] = {}
        for key in ("write", "list", "detail"):
            frame = tk.Frame(self.content, bg=WINDOW_BG, bd=0)
            frame.grid(row=0, column=0, sticky="nsew")
            self.views[key] = frame

        self._build_write_view()
        self._build_list_view()
        self._build_detail_view()

    def _build_top_bar(self) -> None:
        top = tk.Frame(self, bg=WINDOW_BG, bd=0)
        top.place(x=0, y=0, relwidth=1)
        top.columnconfigure(0, weight=1)

        self.life_bar = tk.Canvas(top, height=LIFE_BAR_HEIGHT, bg=WINDOW_BG, highlightthickness=0, bd=0)
        self.life_bar.grid(row=0, column=0, sticky="ew")
        self.life_bar.bind("<Configure>", lambda _e: self._draw_life_bar())

        nav = tk.Frame(top, bg="#0a3d0a", bd=0)
        nav.grid(row=1, column=0, sticky="ew")
        tk.Label(nav, text="ANKY", bg="#0a3d0a", fg=TEXT_FG, font=("Georgia", 14, "bold")).pack(side="left", padx=12, pady=4)
        tk.Label(
            nav,
            textvariable=self.percentage_var,
            bg="#0a3d0a",
            fg=TEXT_FG,
            font=("Segoe UI", 11, "bold"),
        ).pack(side="right", padx=12)

    def _build_write_view(self) -> None:
        root = self.views["write"]
        root.columnconfigure(0, weight=1)
        root.rowconfigure(0, weight=1)

        shell = tk.Frame(root, bg=PANEL_BG, highlightthickness=1, highlightbackground="#333333", bd=0)
        shell.grid(row=0, column=0, sticky="nsew")
        shell.columnconfigure(0, weight=1)
        shell.rowconfigure(0, weight=1)

        self.text_area = tk.Text(
            shell,
            wrap="word",
            undo=True,
            bg=PANEL_BG,
            fg=TEXT_FG,
            insertbackground=TEXT_FG,
            selectbackground="#4b0082",
            relief=tk.FLAT,
            bd=0,
            padx=16,
            pady=14,
            font=("Georgia", 14),
        )
        self.text_area.grid(row=0, column=0, sticky="nsew")
        self.text_area.bind("<<Modified>>", self._on_text_modified)

        self.placeholder_label = tk.Label(
            shell,
            text=PLACEHOLDER,
            bg=PANEL_BG,
            fg=MUTED_FG,
            font=("Georgia", 14, "italic"),
            cursor="xterm",
        )
        self.placeholder_label.place(x=18, y=14)
        self.placeholder_label.bind("<Button-1>", lambda _e: self.text_area.focus_set())

        self.view_writings_button = ttk.Button(root, text="View Writings", command=self._open_writings_list)
        self.view_writings_button.grid(row=1, column=0, pady=(12, 0))

    def _build_list_view(self) -> None:
        root = self.views["list"]
        root.columnconfigure(0, weight=1)
        root.rowconfigure(1, weight=1)

        tk.Label(root, text="Writings:", bg=WINDOW_BG, fg=TEXT_FG, font=("Georgia", 16, "bold")).grid(
            row=0, column=0, sticky="w", pady=(0, 8)
        )

        shell = tk.Frame(root, bg=PANEL_BG, bd=0)
        shell.grid(row=1, column=0, sticky="nsew")
        shell.columnconfigure(0, weight=1)
        shell.rowconfigure(0, weight=1)

        self.list_canvas = tk.Canvas(shell, bg=PANEL_BG, highlightthickness=0, bd=0)
        self.list_canvas.grid(row=0, column=0, sticky="nsew")
        scroll = ttk.Scrollbar(shell, orient=tk.VERTICAL, command=self.list_canvas.yview)
        scroll.grid(row=0, column=1, sticky="ns")
        self.list_canvas.configure(yscrollcommand=scroll.set)

        self.list_inner = tk.Frame(self.list_canvas, bg=PANEL_BG, bd=0)
        self._list_window = self.list_canvas.create_window((0, 0), window=self.list_inner, anchor="nw")
        self.list_inner.bind(
            "<Configure>",
            lambda _e: self.list_canvas.configure(scrollregion=self.list_canvas.bbox("all")),
        )
        self.list_canvas.bind(
            "<Configure>",
            lambda e: self.list_canvas.itemconfigure(self._list_window, width=e.width),
        )

        ttk.Button(root, text="Back", command=self._return_to_writing).grid(row=2, column=0, pady=(12, 0))

    def _build_detail_view(self) -> None:
        root = self.views["detail"]
        root.columnconfigure(0, weight=1)
        root.rowconfigure(1, weight=1)

        tk.Label(root, textvariable=self.detail_title_var, bg=WINDOW_BG, fg=MUTED_FG, font=("Segoe UI", 10)).grid(
            row=0, column=0, sticky="w", pady=(0, 6)
        )

        self.detail_text = tk.Text(
            root,
            wrap="word",
            bg="#000000",
            fg=TEXT_FG,
            relief=tk.FLAT,
            bd=0,
            padx=16,
            pady=14,
            font=("Georgia", 14),
            state="disabled",
        )
        self.detail_text.grid(row=1, column=0, sticky="nsew")

        buttons = tk.Frame(root, bg=WINDOW_BG, bd=0)
        buttons.grid(row=2, column=0, pady=(12, 0))
        ttk.Button(buttons, text="Back", command=self._return_to_writing).grid(row=0, column=0, padx=12)
        ttk.Button(buttons, text="Write Again", command=self._return_to_writing).grid(row=0, column=1, padx=12)

    def _show_view(self, view_key: str) -> None:
        for key, frame in self.views.items():
            if key == view_key:
                frame.grid()
                frame.tkraise()
            else:
                frame.grid_remove()
        if view_key == "write":
            self.text_area.focus_set()
            self._update_write_controls()

    def _on_text_modified(self, _event=None) -> None:
        if not self.text_area.edit_modified():
            return
        # Clearing the flag fires <<Modified>> again, which the check above ignores.
        self.text_area.edit_modified(False)

        content = self.text_area.get("1.0", "end-1c")
        if self.session.record_keystroke(content):
            self.monitor.start(
                on_step=self._on_monitor_step,
                on_expired=self._on_monitor_expired,
                on_error=self._on_monitor_error,
            )
        self._apply_step(full_step())
        self._update_write_controls()

    def _apply_step(self, step: DecayStep) -> None:
        self._current_step = step
        self.percentage_var.set(f"{step.percentage}%")
        self._draw_life_bar()

    def _draw_life_bar(self) -> None:
        canvas = self.life_bar
        width = max(1, canvas.winfo_width())
        step = self._current_step
        canvas.delete("all")
        bar_width = int(width * step.percentage / 100)
        if bar_width > 0:
            canvas.create_rectangle(0, 0, bar_width, LIFE_BAR_HEIGHT, fill=step.color, outline=step.color)

    def _update_write_controls(self) -> None:
        has_text = bool(self.text_area.get("1.0", "end-1c"))
        if has_text:
            self.placeholder_label.place_forget()
        else:
            self.placeholder_label.place(x=18, y=14)

        if self.session.is_running:
            self.view_writings_button.state(["disabled"])
        else:
            self.view_writings_button.state(["!disabled"])

    def _open_writings_list(self) -> None:
        if self.session.is_running:
            return
        self._refresh_writings_list()
        self._show_view("list")

    def _refresh_writings_list(self) -> None:
        for button in self._writing_buttons:
            button.destroy()
        self._writing_buttons = []

        writings = self.store.list_writings()
        if not writings:
            empty = tk.Label(self.list_inner, text="Nothing written yet.", bg=PANEL_BG, fg=MUTED_FG, font=("Georgia", 12))
            empty.pack(anchor="w", padx=12, pady=12)
            self._writing_buttons.append(empty)
            return

        for writing in writings:
            button = tk.Button(
                self.list_inner,
                text=trim_text(writing.text, 30),
                anchor="w",
                bd=0,
                relief=tk.FLAT,
                bg="#262626",
                fg=TEXT_FG,
                activebackground="#333333",
                activeforeground=TEXT_FG,
                padx=12,
                pady=6,
                font=("Segoe UI", 10),
                cursor="hand2",
                command=lambda path=writing.path: self._open_writing(path),
            )
            button.pack(fill="x", padx=8, pady=(8, 0))
            self._writing_buttons.append(button)

    def _open_writing(self, path: Path) -> None:
        writing = self.store.load(path)
        if writing is None:
            return
        self._show_writing(writing)

    def _show_writing(self, writing: Writing) -> None:
        self.detail_title_var.set(writing.path.name)
        self.detail_text.configure(state="normal")
        self.detail_text.delete("1.0", "end")
        self.detail_text.insert("end", writing.text)
        self.detail_text.configure(state="disabled")
        self._show_view("detail")

    def _return_to_writing(self) -> None:
        self._reset_session()
        self._show_view("write")

    def _reset_session(self) -> None:
        self.monitor.stop()
        self.session.reset()
        self.text_area.delete("1.0", "end")
        self.text_area.edit_modified(False)
        self.text_area.edit_reset()
        self._apply_step(full_step())

    def _on_monitor_step(self, step: DecayStep) -> None:
        self.events.put(("step", step))

    def _on_monitor_expired(self, writing: Writing) -> None:
        self.events.put(("expired", writing))

    def _on_monitor_error(self, error: Exception) -> None:
        self.events.put(("error", error))

    def _drain_events(self) -> None:
        while True:
            try:
                kind, payload = self.events.get_nowait()
            except queue.Empty:
                break

            if kind == "step":
                if isinstance(payload, DecayStep) and self._is_current_step(payload):
                    self._apply_step(payload)
            elif kind == "expired":
                if not isinstance(payload, Writing):
                    continue
                self.monitor.stop()
                self._apply_step(full_step())
                self._show_writing(payload)
            elif kind == "error":
                logger.error("Keystroke monitor stopped: %s", payload)
                self.monitor.stop()
                self.session.reset()
                self._apply_step(full_step())
                self._update_write_controls()

        self.after(250, self._drain_events)

    def _is_current_step(self, step: DecayStep) -> bool:
        # A step computed before the latest keystroke would undo its reset to 100%.
        return self.session.is_running and step.keystroke_at == self.session.last_keystroke

    def _on_resize(self, event) -> None:
        if event.widget is not self:
            return
        self._render_background(event.width, event.height)

    def _render_background(self, width: int, height: int) -> None:
        if self._background_source is None:
            return
        size = (max(1, width), max(1, height))
        if size == self._background_size:
            return
        self._background_size = size
        image = ImageOps.fit(self._background_source, size, Image.Resampling.LANCZOS)
        image = ImageEnhance.Brightness(image).enhance(BACKGROUND_BRIGHTNESS)
        self._background_photo = ImageTk.PhotoImage(image)
        self.background_canvas.delete("background")
        self.background_canvas.create_image(0, 0, image=self._background_photo, anchor="nw", tags="background")

    def _on_close(self) -> None:
        self.monitor.stop()
        self.destroy()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="anky")
    parser.add_argument("--version", action="store_true", help="Print app version and exit")
    parser.add_argument("--writings-dir", help="Directory that holds the numbered writings")
    parser.add_argument("--verbose", action="store_true", help="Log every decay tick")
    args = parser.parse_args(argv)
    if args.version:
        print(__version__)
        return 0

    _configure_logging(args.verbose)
    settings = load_settings(settings_path())
    store = WritingStore(writings_directory(args.writings_dir or settings.writings_dir))
    try:
        store.ensure_directory()
    except WritingStoreError as exc:
        logger.error("%s", exc)
        return 1

    app = AnkyApp(settings, store)
    app.mainloop()
    return 0
