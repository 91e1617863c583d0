import logging
import time
from functools import wraps

# Configuration defaults
SIMPLIFY_TOLERANCE = 0.4  # Douglas-Peucker tolerance for traced outlines, in pixels
ALPHA_THRESHOLD = 0  # Pixels with alpha above this are opaque
MARCHING_SQUARES_LEVEL = 0.5
SELECT_DISTANCE = 0.3  # Pick tolerance for editing, in world units
TRIANGLE_FLAGS = 'p'  # Planar straight line graph
POSITION_EPSILON = 1e-9  # Two vertices closer than this share a position
UV_BOUNDS_SPACE = 'local'

logger = logging.getLogger('spritemesh')


def timed(func):
    """Decorator to log the execution time of a function."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        t1 = time.perf_counter()
        logger.debug(f"[TIMING] {func.__name__:25s}: {t1 - t0:0.3f}s")
        return result

    return wrapper
