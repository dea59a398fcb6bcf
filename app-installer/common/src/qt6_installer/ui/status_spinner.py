import tkinter as tk

from qt6_installer.ui.theme import Theme


class StatusSpinner:
    def __init__(self, parent, status_label):
        """
        Initializes the spinner shown left of the status line while a run is active.
        :param parent: The frame holding the status label.
        :param status_label: The label the spinner sits next to.
        """
        self.parent = parent
        self.status_label = status_label
        label_kwargs = {"text": "", "font": ("Arial", 12, "bold")}
        if Theme.active:
            label_kwargs.update(bg=Theme.header_bg, fg=Theme.accent)
        else:
            label_kwargs.update(bg="lightgrey", fg="black")
        self.spinner_label = tk.Label(parent, **label_kwargs)
        self.active = False
        self.symbols = ["|", "/", "-", "\\"]
        self.colors = [Theme.accent, Theme.accent_soft, Theme.accent, Theme.accent_soft] if Theme.active else ["black"] * 4
        self._job = None
        self._index = 0

    def start(self):
        """Starts the spinner animation."""
        if self.active:
            return
        self.active = True
        self._index = 0
        self.spinner_label.pack(side=tk.LEFT, before=self.status_label, padx=(10, 0))
        self._animate()

    def stop(self):
        """Stops the spinner animation and hides it."""
        self.active = False
        if self._job is not None:
            try:
                self.spinner_label.after_cancel(self._job)
            except tk.TclError:
                pass
            self._job = None
        self.spinner_label.pack_forget()

    def _animate(self):
        if not self.active:
            return
        idx = self._index
        self.spinner_label.config(
            text=self.symbols[idx % len(self.symbols)],
            fg=self.colors[idx % len(self.colors)],
        )
        self._index += 1
        self._job = self.spinner_label.after(100, self._animate)
