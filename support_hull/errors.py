# support_hull/errors.py


class SupportPolygonError(ValueError):
    """Base class for failures while building a support polygon."""


class HullDegenerate(SupportPolygonError):
    """Fewer than 3 distinct points, or all points collinear."""


class MultiplePolygonsFound(SupportPolygonError):
    """Hull reconstruction produced more than one boundary ring."""

    def __init__(self, n_rings: int):
        super().__init__(f"Expected a single hull polygon, found {n_rings}")
        self.n_rings = n_rings


class CollaboratorLookupFailed(SupportPolygonError):
    """The pose provider could not supply a contact frame."""

    def __init__(self, frame: str, reason: str = ""):
        msg = f"Pose lookup failed for frame '{frame}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.frame = frame
