import sys
from pathlib import Path


def get_resource_path(*parts: str) -> Path:
    """
    Absolute path to a bundled resource, handling PyInstaller bundles.

    In development the base is the project root (parent of quotum/); in a
    PyInstaller bundle it is _MEIPASS.

    Args:
        *parts: Path components relative to project/bundle root
                e.g. get_resource_path('resources', 'icon.ico')
    """
    if hasattr(sys, '_MEIPASS'):
        base = Path(sys._MEIPASS)
    else:
        base = Path(__file__).parent.parent.parent

    return base.joinpath(*parts)


def apply_windows_dark_mode(widget):
    """
    Apply Windows dark mode to a widget's title bar (Windows 10 1809+ / Windows 11).

    No-op on other platforms.
    """
    if sys.platform != "win32":
        return

    import ctypes
    hwnd = int(widget.winId())
    dwmapi = ctypes.windll.dwmapi

    value = ctypes.c_int(1)  # 1 = dark mode
    # DWMWA_USE_IMMERSIVE_DARK_MODE is 20 on 20H1+, 19 on 1809-1909
    for attribute in (20, 19):
        result = dwmapi.DwmSetWindowAttribute(
            hwnd,
            attribute,
            ctypes.byref(value),
            ctypes.sizeof(value),
        )
        if result == 0:
            return
