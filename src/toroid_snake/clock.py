"""Fixed-period tickers that decouple simulation steps from frame rate."""

from __future__ import annotations


class FixedTimestep:
    """A ticker that fires once every *period* units of simulation time."""

    def __init__(self, period: float) -> None:
        if period <= 0:
            raise ValueError("period must be positive.")
        self.period = period
        self.next_due = period

    def due(self, now: float) -> bool:
        return self.next_due <= now

    def fire(self) -> float:
        """Consume the pending tick and return the time it was due."""
        fired_at = self.next_due
        self.next_due += self.period
        return fired_at


class TickSchedule:
    """Merges named fixed-period tickers into one time-ordered sequence.

    Ticks due at the same instant fire in the order the tickers were
    given, so a frame spanning several periods replays them exactly as
    small frames would.
    """

    def __init__(self, *tickers: tuple[str, float]) -> None:
        if not tickers:
            raise ValueError("At least one ticker is required.")
        self.now = 0.0
        self.tickers = [(name, FixedTimestep(period)) for name, period in tickers]

    def advance(self, dt: float) -> list[str]:
        """Move time forward by *dt* and return the names of due ticks."""
        if dt < 0:
            raise ValueError("dt must not be negative.")
        end = self.now + dt
        fired: list[str] = []
        while True:
            next_due = min(ticker.next_due for _, ticker in self.tickers)
            if next_due > end:
                break
            self.now = next_due
            for name, ticker in self.tickers:
                if ticker.due(next_due):
                    ticker.fire()
                    fired.append(name)
        self.now = end
        return fired
