"""
Line classification for installation script output.
Each line gets a Category which the log view maps 1:1 to a colour.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


class Category(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    BANNER = "banner"
    PLAIN = "plain"


class Stream(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"
    SHELL = "shell"  # lines written by the front-end itself


@dataclass(frozen=True)
class LogLine:
    text: str
    category: Category
    stream: Stream = Stream.STDOUT


# Checked top to bottom, first match wins. A line with both "Building" and
# "Error" is INFO.
CLASSIFICATION_RULES = (
    (Category.INFO, ("[INFO]", "Building", "Configuring")),
    (Category.SUCCESS, ("[SUCCESS]", "successfully", "Complete")),
    (Category.WARNING, ("[WARNING]",)),
    (Category.ERROR, ("[ERROR]", "error:", "Error")),
    (Category.BANNER, ("===",)),
)

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    """Remove terminal colour/cursor escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def classify(line: str) -> Category:
    """Return the Category of a single output line."""
    for category, markers in CLASSIFICATION_RULES:
        if any(marker in line for marker in markers):
            return category
    return Category.PLAIN


def split_lines(chunk: str) -> List[str]:
    """Split a chunk on newlines, dropping empty lines and escape sequences."""
    lines = []
    for raw in strip_ansi(chunk).split("\n"):
        line = raw.rstrip("\r")
        if line:
            lines.append(line)
    return lines


def classify_chunk(chunk: str) -> List[LogLine]:
    """Classify every non-empty stdout line of a chunk."""
    return [LogLine(line, classify(line), Stream.STDOUT) for line in split_lines(chunk)]


def stderr_lines(chunk: str) -> List[LogLine]:
    """stderr is not classified: every line renders as an error in the stderr colour."""
    return [LogLine(line, Category.ERROR, Stream.STDERR) for line in split_lines(chunk)]


def shell_line(text: str, category: Category) -> LogLine:
    """A line authored by the front-end (banners, stop notices)."""
    return LogLine(text, category, Stream.SHELL)
