import os
import sys
import tkinter
import tkinter.messagebox
import logging
import customtkinter
from . import config_settings
from .app_logic import TrimmoveApp
from .ffmpeg_utils import is_ffmpeg_available
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _show_startup_error(title, message):
    r_err = tkinter.Tk(); r_err.withdraw(); tkinter.messagebox.showerror(title, message, parent=r_err); r_err.destroy()


def main():
    settings_path = config_settings.config_path()
    setup_logging(os.path.join(os.path.dirname(settings_path), "logs"))
    settings = config_settings.load_settings(settings_path)
    ffmpeg_path = settings.get("ffmpeg_path", "ffmpeg")
    if not is_ffmpeg_available(ffmpeg_path):
        _show_startup_error("Startup Error", f"ERROR: FFmpeg not found/executable ({ffmpeg_path}).\nEnsure it is installed and in PATH.")
        sys.exit(1)

    customtkinter.set_appearance_mode("System"); customtkinter.set_default_color_theme("blue")
    try:
        app = TrimmoveApp(settings, settings_path)
        app.mainloop()
    except Exception as e:
        logger.exception("Unhandled exception in app init/mainloop", extra={"event": "app_crashed"})
        _show_startup_error("Application Critical Error", f"App critical error:\n\n{type(e).__name__}: {e}")
        sys.exit(1)
    finally:
        logger.info("Application exited", extra={"event": "app_exited"})


if __name__ == "__main__":
    main()
