import logging

import numpy as np
from PIL import Image
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from skimage import measure

from .errors import InvalidInputError
from .polygon_graph import PolygonGraph
from .utils import ALPHA_THRESHOLD, MARCHING_SQUARES_LEVEL, SIMPLIFY_TOLERANCE, timed

logger = logging.getLogger(__name__)


class AlphaBitmap:
    """
    Opacity mask of a sprite's texel rectangle.

    ``mask[y, x]`` is True for opaque pixels, with row 0 at the bottom so that
    rows run the same way as texture space.
    """

    def __init__(self, mask):
        self.mask = np.asarray(mask, dtype=bool)
        if self.mask.ndim != 2:
            raise InvalidInputError('bitmap', f"expected a 2D mask, got shape {self.mask.shape}")

    @classmethod
    def from_image(cls, image: Image.Image, rect=None, threshold=ALPHA_THRESHOLD):
        """
        Crops ``image`` to ``rect`` = (x, y, width, height), given in texture
        space with the origin at the bottom-left, and thresholds its alpha.
        """
        if rect is not None:
            x, y, w, h = (int(round(v)) for v in rect)
            top = image.height - (y + h)
            image = image.crop((x, top, x + w, top + h))
        alpha = np.asarray(image.convert('RGBA'))[..., 3]
        return cls(np.flipud(alpha > threshold))

    @property
    def width(self):
        return self.mask.shape[1]

    @property
    def height(self):
        return self.mask.shape[0]

    def opaque(self, x, y):
        return bool(self.mask[y, x])


def bitmap_mask(bitmap):
    """Reads any ``opaque(x, y)`` provider into a boolean ``[y, x]`` array."""
    mask = getattr(bitmap, 'mask', None)
    if mask is not None:
        return np.asarray(mask, dtype=bool)
    return np.array(
        [[bitmap.opaque(x, y) for x in range(bitmap.width)] for y in range(bitmap.height)],
        dtype=bool,
    ).reshape(bitmap.height, bitmap.width)


def trace_outline(mask, level=MARCHING_SQUARES_LEVEL):
    """
    Traces the outer silhouette of a boolean mask with marching squares.

    Returns an ``(N, 2)`` array of sub-pixel ``(x, y)`` points forming a
    closed counter-clockwise ring (the closing point is not repeated). When
    the mask has several islands, the one enclosing the largest area wins.
    """
    mask = np.asarray(mask, dtype=bool)
    if not mask.any():
        raise InvalidInputError('trace_outline', "bitmap has no opaque pixels")

    padded = np.pad(mask.astype(float), 1, constant_values=0)
    best, best_area = None, 0.0
    for contour in measure.find_contours(padded, level):
        if len(contour) < 4:
            continue
        ring = Polygon([(p[1] - 1, p[0] - 1) for p in contour])
        if ring.area > best_area:
            best, best_area = ring, ring.area

    if best is None:
        raise InvalidInputError('trace_outline', "opaque region is too thin to enclose any area")

    coords = np.asarray(orient(best, sign=1.0).exterior.coords)[:-1]
    logger.debug(f"Traced outline with {len(coords)} points, area {best_area:.1f}px")
    return coords


def simplify_polygon(points, tolerance):
    """
    Douglas-Peucker simplification of a closed ring.

    The ring is cut at its first point and at the point farthest from it,
    and each open half is simplified on its own so both cut points survive.
    ``tolerance == 0`` returns the ring unchanged; a larger tolerance never
    keeps more points.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if tolerance < 0:
        raise InvalidInputError('simplify_polygon', f"tolerance must be >= 0, got {tolerance}")
    if len(pts) < 3:
        raise InvalidInputError('simplify_polygon', f"need at least 3 points, got {len(pts)}")
    if tolerance == 0:
        return pts.copy()

    far = int(np.argmax(np.linalg.norm(pts - pts[0], axis=1)))
    if far == 0:
        return pts[:1].copy()
    first_half = measure.approximate_polygon(pts[:far + 1], tolerance)
    second_half = measure.approximate_polygon(np.vstack([pts[far:], pts[:1]]), tolerance)
    return np.vstack([first_half[:-1], second_half[:-1]])


def rescale_polygon(points, bounds):
    """
    Stretches ``points`` so their bounding box fills ``bounds`` =
    (min_x, min_y, max_x, max_y). X and Y scale independently.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    size = hi - lo
    if np.any(size <= 0):
        raise InvalidInputError('rescale_polygon', f"outline has a zero-size bounding box {tuple(size.tolist())}")
    target_lo = np.array(bounds[:2], dtype=float)
    target_hi = np.array(bounds[2:], dtype=float)
    scale = (target_hi - target_lo) / size
    return (pts - (lo + hi) / 2) * scale + (target_lo + target_hi) / 2


@timed
def extract_boundary(bitmap, metrics, affine, simplify_tolerance=SIMPLIFY_TOLERANCE,
                     marching_squares_level=MARCHING_SQUARES_LEVEL):
    """
    Builds a fresh polygon graph from a sprite's silhouette.

    The outline is traced, simplified, stretched over the sprite's local
    physical bounds and mapped into editing space, then joined into a single
    closed loop of segments. No holes are inferred.
    """
    outline = trace_outline(bitmap_mask(bitmap), level=marching_squares_level)
    simplified = simplify_polygon(outline, simplify_tolerance)
    if len(simplified) < 3:
        logger.warning(f"Outline collapsed to {len(simplified)} points at tolerance {simplify_tolerance}")
        raise InvalidInputError(
            'extract_boundary',
            f"outline collapsed to {len(simplified)} points; lower the simplify tolerance",
        )
    local = rescale_polygon(simplified, metrics.bounds)
    graph = PolygonGraph.from_loop(affine.to_world_space(local))
    logger.debug(f"Boundary: {len(outline)} traced points simplified to {len(simplified)}")
    return graph
