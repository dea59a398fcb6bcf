import tkinter as tk

from qt6_installer.config.AppConfig import AppConfig
from qt6_installer.core.installer_logger import get_installer_logger, get_log_file_path
from qt6_installer.ui.app_icon import apply_app_icon
from qt6_installer.ui.installer_window import InstallerWindow
from qt6_installer.ui.theme import Theme


def main():
    # Initialize logging first
    logger = get_installer_logger()
    logger.info("Starting Qt6 Installer application")
    config = AppConfig()

    # Create the main window
    root = tk.Tk()
    root.title(config.WINDOW_TITLE)
    Theme.apply(root)
    root.geometry("900x700")
    root.minsize(640, 480)

    try:
        root._app_icon = apply_app_icon(root)
    except (tk.TclError, OSError) as e:
        logger.error(f"Failed to set application icon: {e}")

    log_file_path = get_log_file_path()
    logger.info(f"Log file location: {log_file_path}")
    window = InstallerWindow(root, log_file_path=log_file_path)

    logger.info("Starting main GUI loop")
    try:
        root.mainloop()
    except Exception:
        logger.exception("Error in main GUI loop")
        raise
    finally:
        logger.info("Qt6 Installer application shutting down")
        # No-op if the window already closed through WM_DELETE_WINDOW
        window.controller.shutdown()


if __name__ == "__main__":
    main()
