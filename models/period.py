"""Period cursor selecting the month or year being viewed."""

from dataclasses import dataclass, replace

from errors import ValidationError

MONTH = "month"
YEAR = "year"
PERIOD_MODES = (MONTH, YEAR)

# Keeps every window inside the calendar's year range.
MAX_OFFSET = {MONTH: 12000, YEAR: 1000}


@dataclass(frozen=True)
class PeriodCursor:
    """Month or year window, expressed as an offset from the present.

    Attributes:
        mode: "month" or "year".
        offset: Units relative to the current month/year (0 = current,
            negative = past, positive = future).
    """

    mode: str = MONTH
    offset: int = 0

    def __post_init__(self):
        if self.mode not in PERIOD_MODES:
            raise ValueError(f"Unknown period mode: {self.mode}")
        limit = MAX_OFFSET[self.mode]
        if abs(self.offset) > limit:
            raise ValidationError(
                f"Offset must be between -{limit} and {limit} {self.mode}s"
            )

    def previous(self) -> "PeriodCursor":
        return replace(self, offset=self.offset - 1)

    def next(self) -> "PeriodCursor":
        return replace(self, offset=self.offset + 1)

    def with_mode(self, mode: str) -> "PeriodCursor":
        """Switch mode; switching always returns to the current period."""
        return PeriodCursor(mode=mode, offset=0)
