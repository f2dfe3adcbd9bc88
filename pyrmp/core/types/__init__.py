"""Value types shared by the motion profile planners."""

from .kinematic_types import (
    EQUALITY_TOLERANCE,
    approx_equal,
    KinematicState,
    Constraints,
    ProfilePhase,
)
