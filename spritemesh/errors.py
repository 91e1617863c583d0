class SpriteMeshError(Exception):
    """Base class for mesh authoring failures.

    ``operation`` names the request that failed so callers can decide
    whether to retry with adjusted input.
    """

    def __init__(self, operation, message):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class InvalidInputError(SpriteMeshError, ValueError):
    """Degenerate traces, empty simplification input, self-referential segments."""


class InvalidConfigurationError(SpriteMeshError, ValueError):
    """Unusable sprite metrics or a missing/singular affine mapping."""


class TriangulationTopologyError(SpriteMeshError, RuntimeError):
    """Constrained edges that cross, overlap or share a position."""
