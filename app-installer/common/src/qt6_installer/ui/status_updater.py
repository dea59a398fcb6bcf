import time

ETA_MIN_PROGRESS = 10
ETA_SMOOTHING = 0.3
ANIMATION_STEP_MS = 10


class EtaEstimator:
    """Remaining-time guess from an exponential moving average of %/second."""

    def __init__(self):
        self.reset()

    def reset(self):
        self._value = 0.0
        self._stamp = None
        self._rate = None
        self.seconds_left = None

    def update(self, value):
        now = time.monotonic()
        if value <= 0 or value >= 100 or self._stamp is None:
            if value <= 0 or value >= 100:
                self._rate = None
                self.seconds_left = None
            self._value, self._stamp = value, now
            return self.seconds_left

        gained = value - self._value
        elapsed = now - self._stamp
        self._stamp = now
        if gained <= 0 or elapsed <= 0:
            return self.seconds_left

        rate = gained / elapsed
        self._rate = rate if self._rate is None else ETA_SMOOTHING * rate + (1 - ETA_SMOOTHING) * self._rate
        self._value = value
        # Early milestones are too coarse to extrapolate from
        self.seconds_left = None if value < ETA_MIN_PROGRESS else (100.0 - value) / self._rate
        return self.seconds_left


class StatusUpdater:
    """Status line, animated progress bar and ETA hint. UI thread only."""

    def __init__(self, status_label, progress_bar, meta_label=None):
        self.status_label = status_label
        self.progress_bar = progress_bar
        self.meta_label = meta_label
        self.eta = EtaEstimator()
        self._animation_job = None

    def set_status(self, text):
        self.status_label.config(text=text)

    def set_progress(self, progress_value):
        """Animate the bar towards progress_value (0-100) and refresh the hint."""
        target = max(0.0, min(100.0, float(progress_value)))
        seconds_left = self.eta.update(target)
        if self.meta_label is not None:
            self.meta_label.config(text=format_progress_meta(target, seconds_left))
        self._animate_to(target)

    def reset(self):
        """New run: back to 0 with no animation."""
        self._cancel_animation()
        self.progress_bar.config(value=0)
        self.eta.reset()
        if self.meta_label is not None:
            self.meta_label.config(text="")

    def _cancel_animation(self):
        if self._animation_job is not None:
            self.progress_bar.after_cancel(self._animation_job)
            self._animation_job = None

    def _animate_to(self, target):
        self._cancel_animation()
        current = float(self.progress_bar["value"])
        if abs(target - current) < 0.5:
            self.progress_bar.config(value=target)
            return

        direction = 1 if target > current else -1

        def tick(position):
            position += direction
            if (position - target) * direction >= 0:
                self.progress_bar.config(value=target)
                self._animation_job = None
                return
            self.progress_bar.config(value=position)
            self._animation_job = self.progress_bar.after(ANIMATION_STEP_MS, tick, position)

        self._animation_job = self.progress_bar.after(ANIMATION_STEP_MS, tick, current)


def format_progress_meta(value, seconds_left):
    """'42%' plus an 'about 1h 05m left' suffix when an estimate exists."""
    text = f"{int(value)}%"
    if seconds_left:
        minutes, seconds = divmod(int(seconds_left), 60)
        hours, minutes = divmod(minutes, 60)
        if hours:
            text += f" · about {hours}h {minutes:02d}m left"
        else:
            text += f" · about {minutes}m {seconds:02d}s left"
    return text
