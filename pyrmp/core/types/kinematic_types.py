from dataclasses import dataclass
import numpy as np

from ..exceptions import InvalidConfiguration

EQUALITY_TOLERANCE: float = 1e-4
"""Absolute tolerance used by every approximate comparison of derived real values in pyrmp
(state, constraint and phase equality, arrival checks)."""


def approx_equal(value1: float, value2: float, tolerance: float = EQUALITY_TOLERANCE) -> bool:
    """Check if two real values are equal within an absolute tolerance.

    Args:
        value1 (float): First value.
        value2 (float): Second value.
        tolerance (float, optional): Absolute tolerance. Defaults to EQUALITY_TOLERANCE.

    Returns:
        bool: True if |value1 - value2| < tolerance.
    """
    return bool(abs(value1 - value2) < tolerance)


@dataclass(frozen=True, eq=False)
class KinematicState:
    """Immutable (position, velocity) pair of a single actuator / degree of freedom.

    This object allows approximate equality comparison (e.g. `if state1 == state2:`), using
    `EQUALITY_TOLERANCE` on both values. As a consequence, it is not hashable.
    """

    position: float = 0.0
    velocity: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "position", float(self.position))
        object.__setattr__(self, "velocity", float(self.velocity))

    def __eq__(self, other: "KinematicState") -> bool:
        if not isinstance(other, KinematicState):
            return NotImplemented
        return approx_equal(self.position, other.position) and approx_equal(
            self.velocity, other.velocity
        )

    __hash__ = None


@dataclass(frozen=True, eq=False)
class Constraints:
    """Kinematic limits for a motion profile.

    `max_acceleration` limits the initial (speeding up) phase of motion and `max_deceleration`
    the final (slowing down) phase. `max_deceleration` is stored as a negative value; if it is
    not provided, the symmetric limit `-max_acceleration` is used. A positive
    `max_deceleration` is interpreted as a magnitude.

    Raises:
        InvalidConfiguration: if max_velocity <= 0, max_acceleration <= 0, max_deceleration
            is 0, or any value is not finite.
    """

    max_velocity: float
    max_acceleration: float
    max_deceleration: float | None = None

    def __post_init__(self):
        if self.max_deceleration is None:
            object.__setattr__(self, "max_deceleration", -self.max_acceleration)
        values = (self.max_velocity, self.max_acceleration, self.max_deceleration)
        if not np.all(np.isfinite(values)):
            raise InvalidConfiguration(f"Constraints must be finite, got {values}.")
        if self.max_velocity <= 0:
            raise InvalidConfiguration(
                f"max_velocity should be greater than 0, got {self.max_velocity}."
            )
        if self.max_acceleration <= 0:
            raise InvalidConfiguration(
                f"max_acceleration should be greater than 0, got {self.max_acceleration}."
            )
        if self.max_deceleration == 0:
            raise InvalidConfiguration("max_deceleration should be non-zero.")
        object.__setattr__(self, "max_velocity", float(self.max_velocity))
        object.__setattr__(self, "max_acceleration", float(self.max_acceleration))
        object.__setattr__(self, "max_deceleration", -abs(float(self.max_deceleration)))

    @property
    def is_symmetric(self) -> bool:
        """True if acceleration and deceleration limits have the same magnitude."""
        return approx_equal(self.max_acceleration, -self.max_deceleration)

    def __eq__(self, other: "Constraints") -> bool:
        if not isinstance(other, Constraints):
            return NotImplemented
        return (
            approx_equal(self.max_velocity, other.max_velocity)
            and approx_equal(self.max_acceleration, other.max_acceleration)
            and approx_equal(self.max_deceleration, other.max_deceleration)
        )

    __hash__ = None


@dataclass(frozen=True, eq=False)
class ProfilePhase:
    """One constant-acceleration segment of a motion profile.

    At local time `tau` (seconds since the start of this phase), the velocity is
    `start_velocity + acceleration * tau` and the displacement from the phase start is
    `start_velocity * tau + 0.5 * acceleration * tau**2`.

    `start_reference` is the elapsed profile time at which this phase starts. It is assigned
    by `MotionProfile` when the phase is added to a profile, so it can be left at 0 when
    building phases by hand.
    """

    duration: float
    acceleration: float
    start_velocity: float
    start_reference: float = 0.0

    def __post_init__(self):
        if not np.isfinite(self.duration) or self.duration < 0:
            raise InvalidConfiguration(
                f"Phase duration should be finite and non-negative, got {self.duration}."
            )
        for name in ["duration", "acceleration", "start_velocity", "start_reference"]:
            object.__setattr__(self, name, float(getattr(self, name)))

    @property
    def end_reference(self) -> float:
        """Elapsed profile time at which this phase ends."""
        return self.start_reference + self.duration

    @property
    def end_velocity(self) -> float:
        """Velocity reached at the end of this phase."""
        return self.velocity_at(self.duration)

    @property
    def displacement(self) -> float:
        """Change in position over the whole phase."""
        return self.displacement_at(self.duration)

    def velocity_at(self, tau: float) -> float:
        """Velocity at local time `tau` into this phase."""
        return self.start_velocity + self.acceleration * tau

    def displacement_at(self, tau: float) -> float:
        """Displacement from the start of the phase at local time `tau` into this phase."""
        return self.start_velocity * tau + 0.5 * self.acceleration * tau * tau

    def __eq__(self, other: "ProfilePhase") -> bool:
        if not isinstance(other, ProfilePhase):
            return NotImplemented
        return (
            approx_equal(self.duration, other.duration)
            and approx_equal(self.acceleration, other.acceleration)
            and approx_equal(self.start_velocity, other.start_velocity)
            and approx_equal(self.start_reference, other.start_reference)
        )

    __hash__ = None
