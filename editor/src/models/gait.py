"""Gait enumeration - the discrete movement speed of a horse."""
from enum import Enum

from constants import GAIT_SPEEDS, GAIT_COLORS, GAIT_ARROW_MULTIPLIERS


class Gait(Enum):
    """Movement speed category. Ordered walk < trot < canter."""
    WALK = 'walk'
    TROT = 'trot'
    CANTER = 'canter'

    @property
    def speed(self) -> float:
        """Speed in meters per second"""
        return GAIT_SPEEDS[self.value]

    @property
    def color(self) -> str:
        return GAIT_COLORS[self.value]

    @property
    def arrow_multiplier(self) -> float:
        return GAIT_ARROW_MULTIPLIERS[self.value]

    @property
    def rank(self) -> int:
        return _GAIT_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Gait):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value):
        """Accept a Gait or its string name ('walk', 'TROT', ...)"""
        if isinstance(value, Gait):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown gait '{value}'")


_GAIT_ORDER = [Gait.WALK, Gait.TROT, Gait.CANTER]
