"""System-tray icon setup via pystray."""

from datetime import date
from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

from calendar_logic import iso_week


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_new_event: Callable[[], None] | None = None,
    on_today: Callable[[], None] | None = None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Week", lambda _icon, _item: on_show(), default=True),
    ]
    if on_today is not None:
        items.append(MenuItem("This Week", lambda _icon, _item: on_today()))
    if on_new_event is not None:
        items.append(MenuItem("New Event", lambda _icon, _item: on_new_event()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    menu = Menu(*items)
    cw = iso_week(date.today())
    icon = pystray.Icon("week-planner", icon_image, f"Week Planner – CW {cw}", menu)
    return icon
