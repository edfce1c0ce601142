"""Wire-plane geometry of a three-view time-projection chamber."""

import numpy as np

from trimatch.utils.enums import SampleStatus, ViewEnum
from trimatch.utils.globals import NUM_VIEWS, WIRE_ANGLES

__all__ = ["WireGeometry"]


class WireGeometry:
    """Geometry of three wire planes read out along a shared drift axis.

    Each view measures the drift coordinate `x` and one wire coordinate,
    related to the transverse coordinates `(y, z)` by

    .. math::
        c_i = z \\cos\\theta_i - y \\sin\\theta_i

    where :math:`\\theta_i` is the wire angle of view `i`. Two views fully
    determine `(y, z)`, hence the position in the third view.

    Attributes
    ----------
    angles : np.ndarray
        (3) Wire angles of the U, V and W views (rad)
    sigma_x : float
        Drift coordinate resolution used to scale the merge residual
    """

    name = "wire"

    def __init__(self, angles=WIRE_ANGLES, sigma_x=0.5, min_sin=1e-3):
        """Initialize the wire plane angles.

        Parameters
        ----------
        angles : List[float], default WIRE_ANGLES
            Wire angles of the U, V and W views (rad)
        sigma_x : float, default 0.5
            Drift coordinate resolution (cm)
        min_sin : float, default 1e-3
            Minimum sine of the angle between two views for them to be
            considered non-parallel
        """
        assert len(angles) == NUM_VIEWS, "Must provide one wire angle per view."
        assert sigma_x > 0.0, "The drift coordinate resolution must be positive."

        self.angles = np.asarray(angles, dtype=np.float64)
        self.sigma_x = sigma_x
        self.min_sin = min_sin
        self._cos = np.cos(self.angles)
        self._sin = np.sin(self.angles)

    def project(self, points, view):
        """Project 3D points onto one view.

        Parameters
        ----------
        points : np.ndarray
            (N, 3) or (3) Point coordinates as (x, y, z)
        view : int
            View to project onto

        Returns
        -------
        np.ndarray
            (N, 2) or (2) Projected positions as (x, wire coordinate)
        """
        points = np.asarray(points, dtype=np.float64)
        x, y, z = points[..., 0], points[..., 1], points[..., 2]
        wire = z * self._cos[view] - y * self._sin[view]

        return np.stack([x, wire], axis=-1)

    def third_view(self, view1, view2):
        """Returns the view which is neither of the two provided.

        Parameters
        ----------
        view1 : int
            First view
        view2 : int
            Second view

        Returns
        -------
        ViewEnum
            Remaining view
        """
        assert view1 != view2, "The two views must be different."

        return ViewEnum(3 - int(view1) - int(view2))

    def merge_two_positions(self, view1, view2, position1, position2):
        """Predict the position in the third view from two views.

        Parameters
        ----------
        view1 : int
            View of the first position
        view2 : int
            View of the second position
        position1 : np.ndarray
            (2) Position in the first view
        position2 : np.ndarray
            (2) Position in the second view

        Returns
        -------
        np.ndarray
            (2) Predicted position in the third view (None if unresolved)
        float
            Drift coordinate agreement residual (chi2)
        SampleStatus
            `OK` or `UNRESOLVABLE`
        """
        # Parallel views do not constrain the transverse coordinates
        det = np.sin(self.angles[view1] - self.angles[view2])
        if view1 == view2 or abs(det) < self.min_sin:
            return None, np.inf, SampleStatus.UNRESOLVABLE

        (x1, c1), (x2, c2) = position1, position2
        z = (c2 * self._sin[view1] - c1 * self._sin[view2]) / det
        y = (c2 * self._cos[view1] - c1 * self._cos[view2]) / det

        view3 = self.third_view(view1, view2)
        x = 0.5 * (x1 + x2)
        wire = z * self._cos[view3] - y * self._sin[view3]
        if not (np.isfinite(x) and np.isfinite(wire)):
            return None, np.inf, SampleStatus.UNRESOLVABLE

        chi2 = ((x1 - x2) / self.sigma_x) ** 2

        return np.array([x, wire]), float(chi2), SampleStatus.OK
