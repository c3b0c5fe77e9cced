"""Entry point: glues pystray (daemon thread) with tkinter (main thread)."""

import ctypes
import logging
import threading

from calendar_window import CalendarWindow
from controller import build_context
from icon_gen import create_icon_image
from settings import load_settings
from tray_icon import create_tray

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    settings = load_settings()
    configure_logging(settings["log_level"])

    # DPI awareness so positions / fonts are crisp on Hi-DPI Windows monitors
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        pass

    context = build_context(settings)
    logger.info("Using event storage at %s", settings["events_path"])
    cal_win = CalendarWindow(context)

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        cal_win.root.after(0, cal_win.toggle)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            cal_win.root.destroy()
        cal_win.root.after(0, _quit)

    def on_new_event() -> None:
        cal_win.root.after(0, cal_win.open_new_event)

    def on_today() -> None:
        cal_win.root.after(0, cal_win.show)

    icon_image = create_icon_image()
    tray = create_tray(icon_image, on_show, on_exit,
                       on_new_event=on_new_event, on_today=on_today)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    cal_win.show()
    # tkinter main loop on the main thread
    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
