"""Multi-pass depth calculation utilities."""
import math
from typing import Iterator, Tuple


def calculate_num_passes(total_depth: float, pass_depth: float) -> int:
    """
    Calculate the number of passes needed for a given depth.

    Args:
        total_depth: Total depth to remove (mm)
        pass_depth: Maximum depth per pass (mm)

    Returns:
        Number of passes required (at least 1)
    """
    if pass_depth <= 0:
        return 1
    # Round first so 1.1 / 0.1 does not become 12 passes
    return max(1, math.ceil(round(total_depth / pass_depth, 9)))


def iter_passes(total_depth: float, pass_depth: float) -> Iterator[Tuple[int, float]]:
    """
    Iterate over passes at full step depth, clamping the last one.

    Unlike an even split, every pass but the last removes exactly
    ``pass_depth``; the last removes whatever remains.

    Args:
        total_depth: Total depth to remove (mm)
        pass_depth: Maximum depth per pass (mm)

    Yields:
        Tuple of (pass_num, cumulative_depth)
    """
    num_passes = calculate_num_passes(total_depth, pass_depth)
    for i in range(num_passes):
        if i == num_passes - 1:
            yield i, total_depth
        else:
            yield i, min(total_depth, (i + 1) * pass_depth)


def iter_z_levels(total_depth: float, pass_depth: float) -> Iterator[float]:
    """
    Yield the Z of each cutting level, from the first pass down to -total_depth.

    The last level is exactly ``-total_depth``.
    """
    for _, cumulative in iter_passes(total_depth, pass_depth):
        yield -cumulative


def calculate_step_count(extent: float, step: float) -> int:
    """
    Number of stepover rings needed to cover ``extent``.

    Returns 0 when the step or extent is not positive.
    """
    if step <= 0 or extent <= 0:
        return 0
    return math.ceil(round(extent / step, 9))
