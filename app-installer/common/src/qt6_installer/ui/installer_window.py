import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from qt6_installer.config.AppConfig import AppConfig
from qt6_installer.core.installer_controller import InstallerController, STATUS_READY_TO_INSTALL
from qt6_installer.core.installer_logger import get_installer_logger
from qt6_installer.ui.log_view import LogView
from qt6_installer.ui.status_spinner import StatusSpinner
from qt6_installer.ui.status_updater import StatusUpdater
from qt6_installer.ui.theme import Theme


class InstallerWindow:
    """
    Main window: script picker, build options, start/stop controls, progress
    bar and colour-coded log. Acts as the view of an InstallerController.
    """

    def __init__(self, root, log_file_path=None, supervisor=None):
        self.root = root
        self.config = AppConfig()
        self.logger = get_installer_logger()
        self.qml_var = tk.BooleanVar(value=self.config.build_qml_default)
        self._poll_job = None
        self._closed = False

        self._build_layout(log_file_path)
        self.status_updater = StatusUpdater(self.status_label, self.progress_bar, self.progress_meta_label)
        self.spinner = StatusSpinner(self.status_frame, self.status_label)

        self.controller = InstallerController(self, supervisor=supervisor, logger=self.logger)
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self._schedule_poll()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_layout(self, log_file_path):
        body = tk.Frame(self.root, bg=Theme.bg)
        body.pack(fill=tk.BOTH, expand=True, padx=12, pady=12)

        ttk.Label(body, text="Qt6 Cross-Compilation Setup", style="Title.TLabel",
                  anchor="center").pack(fill=tk.X)
        ttk.Label(body, text="Build Qt6 for macOS and Windows ARM64", style="Muted.TLabel",
                  anchor="center").pack(fill=tk.X, pady=(0, 10))

        script_group = ttk.LabelFrame(body, text="Installation Script", style="Dark.TLabelframe")
        script_group.pack(fill=tk.X, pady=(0, 8))
        self.script_label = ttk.Label(script_group, text="Script: Not selected", style="Dark.TLabel")
        self.script_label.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=8, pady=8)
        self.browse_button = ttk.Button(script_group, text="Browse...", style="Dark.TButton",
                                        command=self.browse_script)
        self.browse_button.pack(side=tk.RIGHT, padx=8, pady=8)

        options_group = ttk.LabelFrame(body, text="Build Options", style="Dark.TLabelframe")
        options_group.pack(fill=tk.X, pady=(0, 8))
        self.qml_checkbox = ttk.Checkbutton(
            options_group,
            text="Build with QML/QtQuick support (adds 1-2 hours)",
            variable=self.qml_var,
            style="Dark.TCheckbutton",
            command=self._on_qml_toggled,
        )
        self.qml_checkbox.pack(anchor="w", padx=8, pady=8)

        buttons = tk.Frame(body, bg=Theme.bg)
        buttons.pack(fill=tk.X, pady=(0, 8))
        self.start_button = ttk.Button(buttons, text="Start Installation", style="Start.TButton",
                                       command=self.start_installation)
        self.start_button.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(0, 4))
        self.stop_button = ttk.Button(buttons, text="Stop", style="Stop.TButton",
                                      command=self.stop_installation)
        self.stop_button.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(4, 0))
        self.start_button.state(["disabled"])
        self.stop_button.state(["disabled"])

        progress_row = tk.Frame(body, bg=Theme.bg)
        progress_row.pack(fill=tk.X, pady=(0, 8))
        self.progress_bar = ttk.Progressbar(progress_row, maximum=100, mode="determinate",
                                            style="Horizontal.TProgressbar")
        self.progress_bar.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.progress_meta_label = ttk.Label(progress_row, text="", style="Muted.TLabel", width=28, anchor="e")
        self.progress_meta_label.pack(side=tk.RIGHT, padx=(8, 0))

        ttk.Label(body, text="Installation Output:", style="Muted.TLabel").pack(anchor="w")
        self.log_view = LogView(body, log_file_path=log_file_path)
        self.log_view.pack(fill=tk.BOTH, expand=True, pady=(4, 8))

        self.status_frame = tk.Frame(body, bg=Theme.header_bg)
        self.status_frame.pack(fill=tk.X)
        self.status_label = ttk.Label(self.status_frame, text=STATUS_READY_TO_INSTALL, style="Status.TLabel")
        self.status_label.pack(side=tk.LEFT, fill=tk.X, expand=True)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def browse_script(self):
        file_name = filedialog.askopenfilename(
            parent=self.root,
            title="Select install.sh",
            initialdir=self.config.script_dir,
            filetypes=[("Shell Scripts", "*.sh"), ("All Files", "*")],
        )
        if file_name:
            self.controller.select_script(file_name)

    def start_installation(self):
        self.controller.set_build_qml(self.qml_var.get())
        self.controller.start()

    def stop_installation(self):
        self.controller.stop()

    def _on_qml_toggled(self):
        self.controller.set_build_qml(self.qml_var.get())

    def close(self):
        """WM_DELETE_WINDOW handler: kill any running script before the window goes."""
        if self._closed:
            return
        self._closed = True
        if self._poll_job is not None:
            try:
                self.root.after_cancel(self._poll_job)
            except tk.TclError:
                pass
            self._poll_job = None
        self.spinner.stop()
        try:
            self.controller.shutdown()
        except Exception:
            self.logger.exception("Error while stopping the installation on close")
        self.root.destroy()

    def _schedule_poll(self):
        self._poll_job = self.root.after(self.config.poll_interval_ms, self._poll)

    def _poll(self):
        self._poll_job = None
        try:
            self.controller.poll()
        finally:
            if not self._closed:
                self._schedule_poll()

    # ------------------------------------------------------------------
    # View interface used by InstallerController
    # ------------------------------------------------------------------

    def set_script_path(self, path):
        self.script_label.config(text=f"Script: {path}")

    def set_start_enabled(self, enabled):
        self.start_button.state(["!disabled"] if enabled else ["disabled"])

    def set_controls_running(self, running):
        if running:
            self.start_button.state(["disabled"])
            self.stop_button.state(["!disabled"])
            self.browse_button.state(["disabled"])
            self.qml_checkbox.state(["disabled"])
            self.spinner.start()
        else:
            self.start_button.state(["!disabled"])
            self.stop_button.state(["disabled"])
            self.browse_button.state(["!disabled"])
            self.qml_checkbox.state(["!disabled"])
            self.spinner.stop()

    def clear_log(self):
        self.log_view.clear()

    def append_log_lines(self, lines):
        self.log_view.append_lines(lines)

    def set_progress(self, value):
        if value == 0:
            self.status_updater.reset()
        else:
            self.status_updater.set_progress(value)

    def set_status(self, text):
        self.status_updater.set_status(text)

    def show_info(self, title, message):
        messagebox.showinfo(title, message, parent=self.root)

    def show_warning(self, title, message):
        messagebox.showwarning(title, message, parent=self.root)

    def show_error(self, title, message):
        messagebox.showerror(title, message, parent=self.root)
