"""
Window and dialog helpers for the desktop shell.

pywebview owns the editor window; blocking message dialogs use Tk so they can be shown
before the webview GUI loop has started.
"""
import logging
import sys
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

APP_TITLE = "Marginalia"
MAIN_WINDOW = "main"

DEV_SERVER_DOWN_MESSAGE = (
    "Marginalia dev server isn't running.\n\n"
    "Start it with `npm run dev`, or use the packaged build "
    "(set MARGINALIA_BUILD_TYPE=release)."
)


class WindowSurface:
    """Keeps track of named pywebview windows and shows modal messages."""

    def __init__(self):
        self._windows: Dict[str, object] = {}
        self._visible = set()

    def add_window(self, name: str, window, visible: bool = True) -> None:
        self._windows[name] = window
        if visible:
            self._visible.add(name)

    def get_window(self, name: str):
        return self._windows.get(name)

    def is_visible(self, name: str) -> bool:
        return name in self._visible

    def show_window(self, name: str) -> None:
        window = self._windows.get(name)
        if window is None or name in self._visible:
            return
        window.show()
        self._visible.add(name)

    def hide_window(self, name: str) -> None:
        """Hide a window without destroying it. Windows never shown stay hidden."""
        window = self._windows.get(name)
        if window is None or name not in self._visible:
            return
        window.hide()
        self._visible.discard(name)

    def close_window(self, name: str) -> None:
        window = self._windows.pop(name, None)
        self._visible.discard(name)
        if window is not None:
            window.destroy()

    def show_message(
        self,
        title: str,
        message: str,
        kind: str = "error",
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Show a blocking message box with a single OK button.

        `kind` is "error", "warning" or "info". `on_close` runs after the user
        dismisses the box.
        """
        import tkinter
        from tkinter import messagebox

        show = {
            "error": messagebox.showerror,
            "warning": messagebox.showwarning,
        }.get(kind, messagebox.showinfo)

        try:
            root = tkinter.Tk()
        except tkinter.TclError as e:
            # No display to draw on; the terminal is all we have
            logger.error("Cannot open message dialog: %s", e)
            print(f"{title}: {message}", file=sys.stderr)
        else:
            root.withdraw()
            try:
                show(title, message, parent=root)
            finally:
                root.destroy()

        if on_close is not None:
            on_close()


def report_dev_server_unreachable(surface: WindowSurface, exit_process: Callable[[int], None] = sys.exit) -> None:
    """Keep the main window hidden, tell the user, and exit once they acknowledge."""
    surface.hide_window(MAIN_WINDOW)
    surface.show_message(
        APP_TITLE,
        DEV_SERVER_DOWN_MESSAGE,
        kind="error",
        on_close=lambda: exit_process(0),
    )
