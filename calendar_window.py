"""Week planner window (tkinter): seven day columns, event blocks, trash target."""

import logging
import tkinter as tk
from datetime import date
from tkinter import font as tkfont
from tkinter import messagebox, ttk

from PIL import ImageTk

from calendar_logic import day_of_year
from controller import AppContext, WeekSurface
from drag_delete import DragState, Rect
from errors import CalendarError, EventValidationError, InteractionError
from icon_gen import create_trash_image
from layout import GridMetrics, PlacedBlock, hour_labels
from settings import save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
ROW_ALT_BG = "#FAFAFA"
ROW_LINE = "#E0E0E0"
BLOCK_BG = "#B3D7F2"
BLOCK_OUTLINE = "#5A9BD5"
GUTTER_FG = "#888888"

DAY_WIDTH = 150
GUTTER_WIDTH = 44


class CalendarWindow(WeekSurface):
    """Single-week calendar; the tkinter rendering surface of a controller."""

    def __init__(self, context: AppContext) -> None:
        self.context = context
        self.metrics: GridMetrics = context.metrics

        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(True, True)
        self.root.configure(bg=GRID_BG)

        self._setup_fonts()

        settings = context.settings
        self._saved_width: int | None = settings["window_width"]
        self._saved_height: int | None = settings["window_height"]

        # Block bookkeeping: key -> (column, canvas tag)
        self._block_items: dict[str, tuple[int, str]] = {}
        self._tag_seq = 0

        self._columns: list[tk.Canvas] = []
        self._build_shell()

        self.controller = context.attach(
            self, confirm=self._confirm, notify=self._notify)
        self._refresh(self.controller.render)

        self.root.bind("<Escape>", lambda _e: self.hide())
        self.root.bind("<Left>", lambda _e: self._navigate(-1))
        self.root.bind("<Right>", lambda _e: self._navigate(1))
        self.root.bind("<Configure>", self._on_configure)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_small = tkfont.Font(family=base, size=8)

    @staticmethod
    def _title() -> str:
        return f"Week Planner  Day: {day_of_year(date.today())}"

    # ------------------------------------------------------------------
    # Build shell (once): nav bar + scrollable day columns
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        outer = tk.Frame(self.root, bg=GRID_BG)
        outer.pack(fill="both", expand=True, padx=6, pady=4)

        # Navigation row: ◀  Today  ▶   <week title>   New event   [trash]
        nav = tk.Frame(outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 4))

        btn_prev = tk.Label(
            nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT,
            cursor="hand2",
        )
        btn_today.pack(side="left", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        btn_next = tk.Label(
            nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_next.pack(side="left", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        self._week_label = tk.Label(
            nav, font=self.font_header, bg=GRID_BG, fg="#333333",
        )
        self._week_label.pack(side="left", padx=12)

        self._trash_photo = ImageTk.PhotoImage(create_trash_image(40), master=self.root)
        self._trash = tk.Label(nav, image=self._trash_photo, bg=GRID_BG)
        self._trash.pack(side="right", padx=6)

        tk.Button(
            nav, text="New event", font=self.font_normal,
            command=self.open_new_event,
        ).pack(side="right", padx=6)

        # Scrollable area holding the hour gutter and the seven day columns
        body = tk.Frame(outer, bg=GRID_BG)
        body.pack(fill="both", expand=True)
        self._scroll = tk.Canvas(body, bg=GRID_BG, highlightthickness=0)
        vbar = tk.Scrollbar(body, orient="vertical", command=self._scroll.yview)
        self._scroll.configure(yscrollcommand=vbar.set)
        vbar.pack(side="right", fill="y")
        self._scroll.pack(side="left", fill="both", expand=True)

        grid = tk.Frame(self._scroll, bg=GRID_BG)
        self._scroll.create_window((0, 0), window=grid, anchor="nw")
        grid.bind("<Configure>", lambda _e: self._scroll.configure(
            scrollregion=self._scroll.bbox("all")))

        height = self.metrics.column_height
        gutter = tk.Canvas(grid, width=GUTTER_WIDTH, height=height,
                           bg=GRID_BG, highlightthickness=0)
        gutter.grid(row=0, column=0, sticky="n")
        for y, text in hour_labels(self.metrics):
            gutter.create_text(GUTTER_WIDTH - 4, y + 2, text=text, anchor="ne",
                               fill=GUTTER_FG, font=self.font_small)

        for col in range(7):
            canvas = tk.Canvas(grid, width=DAY_WIDTH, height=height,
                               bg=GRID_BG, highlightthickness=0, borderwidth=0)
            canvas.grid(row=0, column=col + 1, padx=1)
            canvas.bind("<B1-Motion>", self._on_block_motion)
            canvas.bind("<ButtonRelease-1>", self._on_block_release)
            self._columns.append(canvas)

        self._scroll.configure(width=GUTTER_WIDTH + 7 * (DAY_WIDTH + 2),
                               height=min(height, 640))

    # ------------------------------------------------------------------
    # WeekSurface
    # ------------------------------------------------------------------
    def clear(self) -> None:
        for canvas in self._columns:
            canvas.delete("all")
        self._block_items.clear()

    def draw_day(self, column: int, day: date, name: str, is_today: bool,
                 metrics: GridMetrics) -> None:
        canvas = self._columns[column]
        header_bg = ACCENT if is_today else HEADER_BG
        header_fg = "white" if is_today else "#333333"
        canvas.create_rectangle(0, 0, DAY_WIDTH, metrics.header_height,
                                fill=header_bg, outline="")
        canvas.create_text(DAY_WIDTH // 2, metrics.header_height // 2,
                           text=f"{name} {day.strftime('%d.%m.%Y')}",
                           fill=header_fg, font=self.font_bold)
        for i, (y, _text) in enumerate(hour_labels(metrics)):
            canvas.create_rectangle(
                0, y, DAY_WIDTH, y + metrics.hour_height,
                fill=ROW_ALT_BG if i % 2 else GRID_BG, outline=ROW_LINE,
            )

    def header_height(self, column: int) -> int:
        return self.metrics.header_height

    def place_block(self, block: PlacedBlock) -> None:
        canvas = self._columns[block.column]
        self._tag_seq += 1
        tag = f"blk{self._tag_seq}"
        canvas.create_rectangle(
            3, block.top, DAY_WIDTH - 3, block.top + block.height,
            fill=BLOCK_BG, outline=BLOCK_OUTLINE, tags=("event", tag),
        )
        canvas.create_text(
            7, block.top + 2, text=block.label, anchor="nw",
            width=DAY_WIDTH - 14, font=self.font_small, tags=("event", tag),
        )
        canvas.tag_bind(tag, "<ButtonPress-1>",
                        lambda e, k=block.key: self._on_block_press(k, e))
        canvas.tag_bind(tag, "<Enter>", lambda _e: canvas.configure(cursor="fleur"))
        canvas.tag_bind(tag, "<Leave>", lambda _e: canvas.configure(cursor=""))
        self._block_items[block.key] = (block.column, tag)

    def remove_block(self, key: str) -> None:
        entry = self._block_items.pop(key, None)
        if entry is None:
            return
        column, tag = entry
        self._columns[column].delete(tag)

    def trash_rect(self) -> Rect:
        x = self._trash.winfo_rootx()
        y = self._trash.winfo_rooty()
        return Rect(x, y, x + self._trash.winfo_width(), y + self._trash.winfo_height())

    def set_title(self, title: str) -> None:
        self._week_label.configure(text=title)

    # ------------------------------------------------------------------
    # Drag to trash
    # ------------------------------------------------------------------
    def _on_block_press(self, key: str, _event: tk.Event) -> None:
        try:
            self.controller.begin_drag(key)
        except InteractionError as exc:
            logger.debug("Ignoring drag start: %s", exc)

    def _on_block_motion(self, event: tk.Event) -> None:
        if self.controller.drag.state is not DragState.DRAGGING:
            return
        over = self.trash_rect().contains(event.x_root, event.y_root)
        self._trash.configure(bg=HEADER_BG if over else GRID_BG)

    def _on_block_release(self, event: tk.Event) -> None:
        if self.controller.drag.state is not DragState.DRAGGING:
            return
        self._trash.configure(bg=GRID_BG)
        try:
            outcome = self.controller.drop(event.x_root, event.y_root)
        except CalendarError as exc:
            logger.error("Deleting event failed: %s", exc)
            messagebox.showerror("Week Planner", str(exc), parent=self.root)
            return
        logger.debug("Drop finished: %s", outcome.value)

    def _confirm(self, message: str) -> bool:
        return messagebox.askyesno("Delete event", message, parent=self.root)

    def _notify(self, _key: str) -> None:
        self.root.bell()

    # ------------------------------------------------------------------
    # New event dialog
    # ------------------------------------------------------------------
    def open_new_event(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("New event")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        event_types = self.context.settings["event_types"]
        fields = [
            ("Title:", tk.StringVar()),
            ("Day (YYYY-MM-DD):", tk.StringVar(value=date.today().isoformat())),
            ("Start (HH:MM):", tk.StringVar()),
            ("End (HH:MM):", tk.StringVar()),
        ]
        for row, (label, var) in enumerate(fields):
            tk.Label(frame, text=label, font=self.font_normal).grid(
                row=row, column=0, sticky="w", pady=4,
            )
            tk.Entry(frame, textvariable=var, width=18, font=self.font_normal).grid(
                row=row, column=1, padx=(8, 0), pady=4,
            )
        title_var, day_var, start_var, end_var = (v for _l, v in fields)

        tk.Label(frame, text="Type:", font=self.font_normal).grid(
            row=4, column=0, sticky="w", pady=4,
        )
        type_box = ttk.Combobox(frame, values=event_types, width=16, state="readonly")
        type_box.set(event_types[0])
        type_box.grid(row=4, column=1, padx=(8, 0), pady=4)

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=5, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            try:
                day = date.fromisoformat(day_var.get().strip())
            except ValueError:
                messagebox.showerror("New event", "Enter the day as YYYY-MM-DD.", parent=dlg)
                return
            try:
                self.controller.create_event(
                    title_var.get(), day, start_var.get(), end_var.get(), type_box.get(),
                )
            except EventValidationError as exc:
                messagebox.showerror("New event", str(exc), parent=dlg)
                return
            except CalendarError as exc:
                logger.error("Saving event failed: %s", exc)
                messagebox.showerror("New event", str(exc), parent=dlg)
                return
            dlg.destroy()

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(
            side="left", padx=4,
        )
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _refresh(self, action, *args) -> None:
        try:
            action(*args)
        except CalendarError as exc:
            logger.error("Rendering week failed: %s", exc)
            messagebox.showerror("Week Planner", str(exc), parent=self.root)
            return
        errors = self.controller.load_errors
        if errors:
            logger.warning("%d stored entries could not be read", len(errors))

    def _navigate(self, direction: int) -> None:
        self._refresh(self.controller.navigate, direction)

    def _go_today(self) -> None:
        self._refresh(self.controller.go_today)

    # ------------------------------------------------------------------
    # Persist window size
    # ------------------------------------------------------------------
    def _on_configure(self, event: tk.Event) -> None:
        if event.widget is not self.root:
            return
        self._saved_width = self.root.winfo_width()
        self._saved_height = self.root.winfo_height()

    def _persist_size(self) -> None:
        settings = self.context.settings
        settings["window_width"] = self._saved_width
        settings["window_height"] = self._saved_height
        save_settings(settings)

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.root.title(self._title())
        self._go_today()
        self.root.deiconify()
        self.root.update_idletasks()

        if self._saved_width is not None and self._saved_height is not None:
            self._position_window(override_size=(self._saved_width, self._saved_height))
        else:
            self._position_window()

        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        # a release that never arrives must not leave a payload behind
        self.controller.cancel_drag()
        self._trash.configure(bg=GRID_BG)
        if self._saved_width is not None and self._saved_height is not None:
            self._persist_size()
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position centred on the screen
    # ------------------------------------------------------------------
    def _position_window(self, override_size: tuple[int, int] | None = None) -> None:
        self.root.update_idletasks()

        if override_size:
            win_w, win_h = override_size
        else:
            win_w = self.root.winfo_reqwidth()
            win_h = self.root.winfo_reqheight()

        x = max(0, (self.root.winfo_screenwidth() - win_w) // 2)
        y = max(0, (self.root.winfo_screenheight() - win_h) // 2)
        self.root.geometry(f"{win_w}x{win_h}+{x}+{y}")
