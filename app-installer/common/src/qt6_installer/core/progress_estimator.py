"""
Coarse progress estimation from milestone substrings in script output.
"""

from typing import Optional

# Order matters: only the first substring found in a chunk is applied.
MILESTONES = (
    ("Checking prerequisites", 5),
    ("llvm-mingw", 10),
    ("Qt6 source", 15),
    ("Configuring Qt6 host", 20),
    ("Building Qt6 host", 30),
    ("Installing Qt6 host", 50),
    ("Configuring Qt6 Windows", 55),
    ("Building Qt6 Windows", 70),
    ("Installing Qt6 Windows", 85),
    ("test application", 95),
    ("Installation Complete", 100),
)

COMPLETE = 100


def match_milestone(chunk: str) -> Optional[int]:
    """Percentage of the first milestone (in table order) found in chunk."""
    for substring, percent in MILESTONES:
        if substring in chunk:
            return percent
    return None


class ProgressEstimator:
    """Monotonic progress watermark for a single installation run."""

    def __init__(self):
        self.watermark = 0

    def reset(self):
        """Start a new run at 0%."""
        self.watermark = 0

    def estimate(self, chunk: str, prior_progress: Optional[int] = None) -> int:
        """
        Raise the watermark if chunk contains a milestone.

        Args:
            chunk: Raw stdout text
            prior_progress: Progress already shown; defaults to the watermark

        Returns:
            max(prior, matched percent), or prior unchanged when nothing matches
        """
        prior = self.watermark if prior_progress is None else max(prior_progress, self.watermark)
        matched = match_milestone(chunk)
        if matched is not None and matched > prior:
            prior = matched
        self.watermark = prior
        return prior

    def complete(self) -> int:
        """Jump to 100% once the script reports success."""
        self.watermark = COMPLETE
        return COMPLETE
