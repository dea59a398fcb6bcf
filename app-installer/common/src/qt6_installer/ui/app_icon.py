"""
Window icon, drawn at runtime so the app ships without image assets.
"""

from PIL import Image, ImageDraw, ImageFont

from qt6_installer.ui.theme import Theme

ICON_SIZE = 64


def create_app_icon(size=ICON_SIZE):
    """Return an RGBA badge: accent rounded square with a white 'Qt' label."""
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    radius = max(2, size // 6)
    draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=radius, fill=Theme.start_bg)

    font = ImageFont.load_default()
    text = "Qt"
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    width, height = right - left, bottom - top
    draw.text(((size - width) / 2 - left, (size - height) / 2 - top), text, fill="white", font=font)
    return image


def apply_app_icon(root):
    """Set the icon on a Tk root. Returns the PhotoImage (keep a reference)."""
    from PIL import ImageTk

    photo = ImageTk.PhotoImage(create_app_icon(), master=root)
    root.iconphoto(True, photo)
    return photo
