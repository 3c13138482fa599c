from bisect import bisect_right
from fractions import Fraction


class TimedText:
    """
    Table mapping frame ranges to text content.

    Each entry is a pair (until, lines). `until` is the fraction of the total
    duration at which the entry stops being shown, or None for an entry that
    lasts until the end. Entries must be given in chronological order.

    Example:
    --------
    >>> captions = TimedText([(Fraction(1, 2), ("first half",)),
    ...                       (None, ("second half",))])
    >>> captions.at(10, total_frames=300)
    ('first half',)
    """

    def __init__(self, entries):
        entries = [(None if until is None else Fraction(until), tuple(lines))
                   for until, lines in entries]
        if not entries:
            raise ValueError("TimedText needs at least one entry.")
        if any(until is None for until, _ in entries[:-1]):
            raise ValueError("Only the last entry may run until the end (until=None).")
        limits = [until for until, _ in entries if until is not None]
        if limits != sorted(limits):
            raise ValueError("Entries must be ordered by their 'until' fraction.")
        self.entries = entries

    @classmethod
    def constant(cls, *lines):
        """Text shown for the whole animation."""
        return cls([(None, lines)])

    @property
    def rows(self):
        """Largest number of lines any entry shows."""
        return max(len(lines) for _, lines in self.entries)

    def thresholds(self, total_frames):
        """
        First frame index that no longer shows each bounded entry.

        Integer division keeps the thresholds on whole frames, so 1/2 of 375
        frames switches at frame 187.
        """
        return [total_frames * until.numerator // until.denominator
                for until, _ in self.entries if until is not None]

    def at(self, frame, total_frames):
        """Lines to show at `frame`."""
        position = bisect_right(self.thresholds(total_frames), frame)
        return self.entries[min(position, len(self.entries) - 1)][1]


class TextBlock:
    """
    A vertical group of centered text rows fed by a TimedText.

    Parameters:
    -----------
    rows : sequence of float
        Screen y coordinate of every row (x is always centered).
    text : TimedText or str
        Content; a plain string becomes constant single-row text.
    fontsize : float, optional
        Font size in pixels (default: 46).
    weight : str, optional
        Matplotlib font weight (default: 'normal').
    """

    def __init__(self, rows, text, fontsize=46, weight='normal'):
        if isinstance(text, str):
            text = TimedText.constant(text)
        self.rows = [float(y) for y in rows]
        self.text = text
        self.fontsize = fontsize
        self.weight = weight
        if self.text.rows > len(self.rows):
            raise ValueError(f"TextBlock has {len(self.rows)} rows but its text needs {self.text.rows}.")

    def lines_at(self, frame, total_frames):
        """Text of every row at `frame`, blank for unused rows."""
        lines = self.text.at(frame, total_frames)
        return list(lines) + [''] * (len(self.rows) - len(lines))
