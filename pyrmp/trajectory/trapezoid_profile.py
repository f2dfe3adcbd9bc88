from typing import List, Tuple
import numpy as np

from .motion_profile import MotionProfile
from ..core.types import EQUALITY_TOLERANCE, Constraints, KinematicState, ProfilePhase
from ..core.logging import logger

_MIN_PHASE_DURATION: float = 1e-9
"""Phases shorter than this (s) are dropped from a planned profile."""

_PhaseParams = Tuple[float, float, float]
"""(duration, acceleration, start_velocity) of a phase, in the direction-normalised frame."""


class AsymmetricTrapezoidProfile(MotionProfile):
    """A MotionProfile for smooth, minimum-time motion between two states, generated with
    velocity, acceleration and deceleration constraints.

    The velocity of this motion forms a trapezoid (accelerate, cruise, decelerate) on a graph,
    or a triangle when the maximum velocity cannot be reached, or a single ramp when the
    boundary velocities already bound the maneuver. Acceleration limiting has different
    constraints for the initial phase of motion (`max_acceleration`) and the final phase of
    motion (`max_deceleration`).

    Negative-displacement maneuvers are planned by reflecting the problem into the positive
    direction and reflecting the resulting phases back.

    Boundary velocities above `max_velocity` (in the direction of travel) are conformed to
    `max_velocity`; the profile's initial state carries the conformed velocity.

    NOTE: The profile always starts from `initial` and ends at `target`. If the target
    velocity cannot be reached within the available displacement, the profile ends at the
    target position with the closest reachable velocity. If the initial velocity is too high
    to slow down to the target velocity within the deceleration limit, the single
    decelerating phase exceeds that limit so that both endpoints are still honoured. Both
    cases are logged as warnings.
    """

    def __init__(
        self,
        constraints: Constraints,
        target: KinematicState,
        initial: KinematicState = KinematicState(),
    ):
        """A MotionProfile for smooth motion between two states.

        Args:
            constraints (Constraints): The limits on the profile (max velocity, acceleration
                and deceleration).
            target (KinematicState): The desired state when the profile is complete.
            initial (KinematicState, optional): The state at the start of the profile
                (usually the current state). Defaults to KinematicState() (zero position
                and velocity).
        """
        self._constraints = constraints
        self._target = target
        self._direction = 1.0 if target.position >= initial.position else -1.0

        distance = self._direction * (target.position - initial.position)
        initial_velocity = min(self._direction * initial.velocity, constraints.max_velocity)
        target_velocity = min(self._direction * target.velocity, constraints.max_velocity)

        self._shape, phase_specs = _plan_phases(
            distance=distance,
            initial_velocity=initial_velocity,
            target_velocity=target_velocity,
            max_velocity=constraints.max_velocity,
            acceleration=constraints.max_acceleration,
            deceleration=-constraints.max_deceleration,
        )

        super().__init__(
            initial_state=KinematicState(
                position=initial.position, velocity=self._direction * initial_velocity
            ),
            phases=[
                ProfilePhase(
                    duration=duration,
                    acceleration=self._direction * acceleration,
                    start_velocity=self._direction * start_velocity,
                )
                for duration, acceleration, start_velocity in phase_specs
            ],
        )
        logger.debug(
            f"{self.__class__.__name__}: planned '{self._shape}' profile from {initial} to "
            f"{target} with {len(self.get_phases())} phase(s) over {self.total_time():.4f}s."
        )

    @property
    def constraints(self) -> Constraints:
        """The constraints this profile was planned with."""
        return self._constraints

    @property
    def target(self) -> KinematicState:
        """The requested target state."""
        return self._target

    @property
    def direction(self) -> float:
        """Direction of travel: 1.0 for positive displacement (or none), -1.0 otherwise."""
        return self._direction

    @property
    def shape(self) -> str:
        """Resolved shape of the profile: one of "none", "trapezoid", "triangle", "ramp"."""
        return self._shape


class TrapezoidProfile(AsymmetricTrapezoidProfile):
    """An AsymmetricTrapezoidProfile with the same acceleration and deceleration limit.

    Only `max_velocity` and `max_acceleration` of the given constraints are used; the
    deceleration limit is always `-max_acceleration`.
    """

    def __init__(
        self,
        constraints: Constraints,
        target: KinematicState,
        initial: KinematicState = KinematicState(),
    ):
        """An AsymmetricTrapezoidProfile with the same acceleration and deceleration limit.

        Args:
            constraints (Constraints): The limits on the profile. `max_deceleration` is
                ignored.
            target (KinematicState): The desired state when the profile is complete.
            initial (KinematicState, optional): The state at the start of the profile.
                Defaults to KinematicState() (zero position and velocity).
        """
        super().__init__(
            constraints=Constraints(
                max_velocity=constraints.max_velocity,
                max_acceleration=constraints.max_acceleration,
            ),
            target=target,
            initial=initial,
        )


def _plan_phases(
    distance: float,
    initial_velocity: float,
    target_velocity: float,
    max_velocity: float,
    acceleration: float,
    deceleration: float,
) -> Tuple[str, List[_PhaseParams]]:
    # All quantities are in the direction-normalised frame: distance >= 0, velocities are
    # positive towards the target and acceleration/deceleration are magnitudes.
    v_0, v_f, v_max = initial_velocity, target_velocity, max_velocity

    # ramps up to (and down from) the velocity limit
    accel_distance = (v_max**2 - v_0**2) / (2.0 * acceleration)
    decel_distance = (v_max**2 - v_f**2) / (2.0 * deceleration)

    if accel_distance + decel_distance <= distance:
        shape = "trapezoid"
        phases = [
            ((v_max - v_0) / acceleration, acceleration, v_0),
            ((distance - accel_distance - decel_distance) / v_max, 0.0, v_max),
            ((v_max - v_f) / deceleration, -deceleration, v_max),
        ]
    else:
        # velocity limit not reached: the ramps meet at the peak velocity v_p satisfying
        # (v_p^2 - v_0^2) / 2a + (v_p^2 - v_f^2) / 2d = distance
        v_peak = np.sqrt(
            (2.0 * acceleration * deceleration * distance
             + deceleration * v_0**2
             + acceleration * v_f**2)
            / (acceleration + deceleration)
        )
        if v_peak < v_0 - EQUALITY_TOLERANCE:
            shape = "ramp"
            logger.warning(
                f"Initial velocity {v_0:.4f} is too high to reach velocity {v_f:.4f} within "
                f"{distance:.4f} at the deceleration limit; decelerating harder than allowed."
            )
            phases = []
            if v_0 + v_f > 0:
                duration = 2.0 * distance / (v_0 + v_f)
                if duration > _MIN_PHASE_DURATION:
                    phases.append((duration, (v_f - v_0) / duration, v_0))
        elif v_peak < v_f - EQUALITY_TOLERANCE:
            shape = "ramp"
            duration = (np.sqrt(v_0**2 + 2.0 * acceleration * distance) - v_0) / acceleration
            logger.warning(
                f"Target velocity {v_f:.4f} cannot be reached within {distance:.4f}; ending at "
                f"velocity {v_0 + acceleration * duration:.4f} instead."
            )
            phases = [(duration, acceleration, v_0)]
        else:
            shape = "triangle"
            phases = [
                ((v_peak - v_0) / acceleration, acceleration, v_0),
                ((v_peak - v_f) / deceleration, -deceleration, v_peak),
            ]

    phases = [
        (float(duration), float(accel), float(start_velocity))
        for duration, accel, start_velocity in phases
        if duration > _MIN_PHASE_DURATION
    ]
    if len(phases) == 0:
        shape = "none"
    return shape, phases
