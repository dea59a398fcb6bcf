from qt6_installer.core.output_classifier import Category, Stream


class Theme:
    """Dark theme for the installer window and its log view."""

    # Core palette
    bg = "#1b1f27"
    panel_bg = "#232833"
    panel_bg_alt = "#2b3140"
    header_bg = "#2b3140"
    log_bg = "#1e1e1e"
    log_fg = "#d4d4d4"
    border = "#444444"
    text = "#f4f7fb"
    muted = "#94a2c5"
    accent = "#42a5ff"
    accent_soft = "#2f7ad9"

    button_bg = "#2b3140"
    button_active = "#364055"
    button_text = "#eff6ff"
    button_disabled_bg = "#1f2430"
    button_disabled_text = "#5b6478"
    start_bg = "#4CAF50"
    start_active = "#45a049"
    stop_bg = "#f44336"
    stop_active = "#da190b"

    # Log colours, one per Category; tuned for the dark log background
    category_colors = {
        Category.INFO: "#569cd6",
        Category.SUCCESS: "#4ec94e",
        Category.WARNING: "#ff8c00",
        Category.ERROR: "#f44747",
        Category.BANNER: "#4ec9b0",
        Category.PLAIN: "#d4d4d4",
    }
    stderr_color = "#c80000"

    log_font = ("Menlo", 11)

    # Always run with the custom theme
    active = True

    @staticmethod
    def tag_for(line):
        """Text-widget tag used to colour a LogLine."""
        if line.stream == Stream.STDERR:
            return "stderr"
        return line.category.value

    @staticmethod
    def configure_log_tags(text_widget):
        for category, color in Theme.category_colors.items():
            text_widget.tag_configure(category.value, foreground=color)
        text_widget.tag_configure("stderr", foreground=Theme.stderr_color)

    @staticmethod
    def apply(root):
        if not Theme.active:
            return
        from tkinter import ttk

        root.configure(bg=Theme.bg)

        style = ttk.Style(root)
        try:
            style.theme_use("clam")
        except Exception:
            pass

        style.configure("Dark.TFrame", background=Theme.panel_bg)
        style.configure("Dark.TLabel", background=Theme.panel_bg, foreground=Theme.text)
        style.configure("Muted.TLabel", background=Theme.bg, foreground=Theme.muted)
        style.configure(
            "Title.TLabel",
            background=Theme.bg,
            foreground=Theme.text,
            font=("Segoe UI", 18, "bold"),
        )
        style.configure(
            "Status.TLabel",
            background=Theme.header_bg,
            foreground=Theme.text,
            padding=(5, 5),
        )
        style.configure(
            "Dark.TLabelframe",
            background=Theme.panel_bg,
            foreground=Theme.text,
            bordercolor=Theme.border,
        )
        style.configure(
            "Dark.TLabelframe.Label",
            background=Theme.panel_bg,
            foreground=Theme.text,
        )
        style.configure(
            "Horizontal.TProgressbar",
            troughcolor=Theme.panel_bg,
            background=Theme.accent,
            bordercolor=Theme.border,
            lightcolor=Theme.accent,
            darkcolor=Theme.accent_soft,
            thickness=14,
        )

        # Buttons
        style.configure(
            "Dark.TButton",
            background=Theme.button_bg,
            foreground=Theme.button_text,
            bordercolor=Theme.border,
            focusthickness=2,
            focuscolor=Theme.accent_soft,
            padding=(16, 8),
            relief="flat",
        )
        style.map(
            "Dark.TButton",
            background=[("active", Theme.button_active), ("disabled", Theme.button_disabled_bg)],
            foreground=[("disabled", Theme.button_disabled_text)],
        )
        for name, bg, active_bg in (
            ("Start.TButton", Theme.start_bg, Theme.start_active),
            ("Stop.TButton", Theme.stop_bg, Theme.stop_active),
        ):
            style.configure(
                name,
                background=bg,
                foreground="white",
                padding=(8, 8),
                font=("Segoe UI", 10, "bold"),
                relief="flat",
            )
            style.map(
                name,
                background=[("disabled", "#cccccc"), ("active", active_bg)],
                foreground=[("disabled", Theme.button_disabled_text)],
            )

        # Checkbuttons
        style.configure(
            "Dark.TCheckbutton",
            background=Theme.panel_bg,
            foreground=Theme.text,
            focuscolor=Theme.panel_bg,
            indicatormargin=4,
        )
        style.map(
            "Dark.TCheckbutton",
            background=[("active", Theme.panel_bg), ("selected", Theme.panel_bg)],
            foreground=[("disabled", Theme.muted)],
        )
