"""
progression.py — XP → level mapping
Pure functions over an immutable threshold table. No I/O.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LevelTable:
    """Minimum cumulative XP per level; index 0 is level 1."""

    thresholds: tuple[int, ...]

    def __post_init__(self):
        if not self.thresholds or self.thresholds[0] != 0:
            raise ValueError("Level 1 must start at 0 XP")
        for lower, upper in zip(self.thresholds, self.thresholds[1:]):
            if upper <= lower:
                raise ValueError("Level thresholds must be strictly increasing")

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    def threshold(self, level: int) -> int:
        """Minimum XP for `level`, saturating at both ends of the table."""
        level = min(max(level, 1), self.max_level)
        return self.thresholds[level - 1]


DEFAULT_LEVEL_TABLE = LevelTable((0, 500, 1500, 3500, 7500, 15000, 30000, 60000))

LEVEL_TITLES = {
    1: "Conformist",
    2: "Self-Aware",
    3: "Architect",
    4: "Builder",
    5: "Strategist",
    6: "Visionary",
    7: "Master",
    8: "Legend",
}


def calculate_level(total_xp: int, table: LevelTable = DEFAULT_LEVEL_TABLE) -> int:
    """Highest level whose threshold is <= total_xp (inclusive lower bound)."""
    for level in range(table.max_level, 0, -1):
        if total_xp >= table.threshold(level):
            return level
    return 1


def get_xp_for_next_level(current_level: int, table: LevelTable = DEFAULT_LEVEL_TABLE) -> int:
    """Threshold of the next level; at the top level, the top threshold itself."""
    return table.threshold(current_level + 1)


def get_xp_progress(total_xp: int, current_level: int, table: LevelTable = DEFAULT_LEVEL_TABLE) -> float:
    """
    Percent of the way from the current level's threshold to the next one.
    Not clamped: callers clamp for display. The top level has a zero-width
    interval and reports 100.0.
    """
    lower = table.threshold(current_level)
    upper = get_xp_for_next_level(current_level, table)
    if upper == lower:
        return 100.0
    return (total_xp - lower) / (upper - lower) * 100


def clamp_progress(percent: float) -> float:
    return max(0.0, min(100.0, percent))


def get_level_title(level: int) -> str:
    return LEVEL_TITLES[min(max(level, 1), max(LEVEL_TITLES))]
