from collections import deque

from worldmap.grid import Grid


def is_connected(coords):
    """True if the coordinates form one 4-connected group."""
    coords = set(coords)
    if not coords:
        return True
    start = next(iter(coords))
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for n in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if n in coords and n not in seen:
                seen.add(n)
                queue.append(n)
    return seen == coords


def fill(grid: Grid, terrain):
    for cell in grid:
        cell.set_terrain(terrain)
    return grid


class FixedRandom:
    """Stand-in RNG whose ``random()`` always returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value
