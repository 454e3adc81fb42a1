# Game clock for the simulation.
# Advances only when the driver ticks it, so runs stay reproducible.

SECONDS_PER_DAY = 86400


class TimeSystem:
    """
    Simulated time of day.

    One real second advances ``speed`` game seconds; the default of 60 makes
    one real second a game minute.
    """

    def __init__(self, start_hour: float = 8, speed: float = 60):
        self.total_seconds = float(start_hour) * 3600
        self.day = 1
        self.speed = float(speed)
        self.hour = int(self.total_seconds // 3600)
        self.minute = int((self.total_seconds % 3600) // 60)

    @classmethod
    def from_config(cls, config) -> "TimeSystem":
        return cls(start_hour=config['time.start_hour'], speed=config['time.speed'])

    @property
    def time_scale(self) -> float:
        """Movement multiplier relative to the default speed."""
        return self.speed / 60.0

    def update(self, delta: float):
        """Advance the clock by ``delta`` real seconds."""
        self.total_seconds += delta * self.speed
        while self.total_seconds >= SECONDS_PER_DAY:
            self.total_seconds -= SECONDS_PER_DAY
            self.day += 1

        self.hour = int(self.total_seconds // 3600)
        self.minute = int((self.total_seconds % 3600) // 60)

    def time_string(self) -> str:
        return f"Day {self.day} - {self.hour:02d}:{self.minute:02d}"
