"""
Reputation Levels

Pure functions mapping reputation points to a level and to progress
toward the next level. No database access.

Level table:
    level  name         from points
    0      Newcomer     0
    1      Contributor  100
    2      Regular      500
    3      Expert       1000
    4      Authority    5000
    5      Legend       10000   (terminal, no upper bound)
"""

LEVEL_THRESHOLDS: tuple[int, ...] = (0, 100, 500, 1000, 5000, 10000)

LEVEL_NAMES: tuple[str, ...] = (
    "Newcomer",
    "Contributor",
    "Regular",
    "Expert",
    "Authority",
    "Legend",
)

MAX_LEVEL = len(LEVEL_THRESHOLDS) - 1


def level_for_points(points: int) -> int:
    """
    Level reached with the given number of points.

    Negative balances stay at level 0.

    Example:
        >>> level_for_points(499)
        1
        >>> level_for_points(500)
        2
    """
    reached = sum(1 for threshold in LEVEL_THRESHOLDS if threshold <= points)
    return min(max(reached - 1, 0), MAX_LEVEL)


def level_name(level: int) -> str:
    return LEVEL_NAMES[min(max(level, 0), MAX_LEVEL)]


def progress_to_next_level(points: int, level: int) -> int:
    """
    Percentage (0-100, rounded) of the way from `level` to the next one.

    The terminal level always reports 100.
    """
    if level >= MAX_LEVEL:
        return 100

    level = max(level, 0)
    current = LEVEL_THRESHOLDS[level]
    upcoming = LEVEL_THRESHOLDS[level + 1]
    progress = round((points - current) / (upcoming - current) * 100)
    return min(100, max(0, progress))


def points_to_next_level(points: int, level: int) -> int:
    """Points still missing to reach the next level; 0 at the terminal level."""
    if level >= MAX_LEVEL:
        return 0
    return max(0, LEVEL_THRESHOLDS[max(level, 0) + 1] - points)
