import logging
import os
import subprocess
import sys
import tkinter as tk
from tkinter import ttk

from qt6_installer.core.installer_logger import LOGGER_NAME
from qt6_installer.ui.theme import Theme


class LogView:
    """Read-only, auto-scrolling, colour-tagged view of the installation output."""

    def __init__(self, parent, log_file_path=None):
        self.log_file_path = log_file_path
        self.frame = tk.Frame(
            parent,
            bg=Theme.panel_bg,
            highlightbackground=Theme.border,
            highlightthickness=1,
            bd=0,
        )
        self.text = tk.Text(
            self.frame,
            height=20,
            wrap="char",
            font=Theme.log_font,
            bg=Theme.log_bg,
            fg=Theme.log_fg,
            insertbackground=Theme.log_fg,
            relief=tk.FLAT,
            state="disabled",
        )
        Theme.configure_log_tags(self.text)
        scrollbar = ttk.Scrollbar(self.frame, orient=tk.VERTICAL, command=self.text.yview)
        self.text.configure(yscrollcommand=scrollbar.set)

        controls = tk.Frame(self.frame, bg=Theme.panel_bg)
        controls.pack(side=tk.BOTTOM, fill=tk.X, padx=12, pady=(0, 12))
        ttk.Button(controls, text="Copy log", style="Dark.TButton",
                   command=self.copy_to_clipboard).pack(side=tk.LEFT)
        self.open_button = ttk.Button(controls, text="Open log file", style="Dark.TButton",
                                      command=self.open_log_file)
        self.open_button.pack(side=tk.LEFT, padx=(12, 0))
        if not self.log_file_path:
            self.open_button.state(["disabled"])

        self.text.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(12, 0), pady=12)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y, padx=(0, 12), pady=12)

    def pack(self, **kwargs):
        self.frame.pack(**kwargs)

    def append_lines(self, lines):
        """Append LogLines at the end, each coloured by its tag."""
        if not lines:
            return
        self.text.configure(state="normal")
        for line in lines:
            self.text.insert(tk.END, line.text + "\n", Theme.tag_for(line))
        self.text.configure(state="disabled")
        self.text.see(tk.END)

    def clear(self):
        self.text.configure(state="normal")
        self.text.delete("1.0", tk.END)
        self.text.configure(state="disabled")

    def get_text(self):
        return self.text.get("1.0", tk.END).strip()

    def copy_to_clipboard(self):
        content = self.get_text()
        if not content:
            return
        try:
            self.frame.clipboard_clear()
            self.frame.clipboard_append(content)
        except tk.TclError:
            pass

    def open_log_file(self):
        if not self.log_file_path or not os.path.exists(self.log_file_path):
            return
        try:
            if os.name == "nt":
                os.startfile(self.log_file_path)  # type: ignore[attr-defined]
            elif sys.platform == "darwin":
                subprocess.Popen(["open", self.log_file_path])
            else:
                subprocess.Popen(["xdg-open", self.log_file_path])
        except OSError as e:
            logging.getLogger(LOGGER_NAME).error(f"Could not open log file {self.log_file_path}: {e}")
