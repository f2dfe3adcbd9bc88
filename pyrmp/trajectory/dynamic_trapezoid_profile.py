"""Incremental trapezoidal profile: a per-tick step function for closed control loops.

Instead of caching a full plan, the next setpoint is derived from the current (measured)
state every control period. This makes the planner robust to a target that changes between
ticks, and keeps it stateless.
"""

from typing import Tuple
import numpy as np

from ..core.types import EQUALITY_TOLERANCE, Constraints, KinematicState
from ..core.exceptions import InvalidConfiguration
from ..core.logging import throttled_logging


def next_trapezoid_setpoint(
    current: KinematicState,
    target_position: float,
    control_period: float,
    constraints: Constraints,
) -> KinematicState:
    """Get the setpoint one control period ahead of the current state, following a
    trapezoidal velocity profile towards the target position.

    The next state is found by integrating a piecewise-constant acceleration over one control
    period:
        - if moving away from the target, brake (at the deceleration limit) to rest first,
        - if the stopping distance from the current velocity would not fit in the distance left
            after accelerating for a full period, decelerate (never past zero velocity),
        - otherwise accelerate, without exceeding the velocity limit.
    A step that reaches or crosses the target returns exactly (target_position, 0).

    Args:
        current (KinematicState): Current (measured) state of the actuator.
        target_position (float): Position to move to. May change between calls.
        control_period (float): Time (s) between this call and the next one.
        constraints (Constraints): Velocity, acceleration and deceleration limits.

    Raises:
        InvalidConfiguration: if `control_period` is not a finite positive number.

    Returns:
        KinematicState: The setpoint to command at the next control tick.
    """
    if not np.isfinite(control_period) or control_period <= 0:
        raise InvalidConfiguration(
            f"control_period should be a finite value greater than 0, got {control_period}."
        )

    distance = target_position - current.position
    if abs(distance) < EQUALITY_TOLERANCE:
        return KinematicState(position=target_position, velocity=0.0)

    # plan in the frame where the target is ahead
    direction = 1.0 if distance > 0 else -1.0
    travelled, velocity = _advance(
        distance_to_go=direction * distance,
        velocity=direction * current.velocity,
        duration=control_period,
        constraints=constraints,
    )
    if travelled >= direction * distance - EQUALITY_TOLERANCE:
        return KinematicState(position=target_position, velocity=0.0)

    return KinematicState(
        position=current.position + direction * travelled,
        velocity=direction * velocity,
    )


def _integrate(velocity: float, acceleration: float, duration: float) -> Tuple[float, float]:
    return velocity * duration + 0.5 * acceleration * duration**2, velocity + acceleration * duration


def _advance(
    distance_to_go: float,
    velocity: float,
    duration: float,
    constraints: Constraints,
) -> Tuple[float, float]:
    # returns (distance travelled towards the target, velocity towards the target) after
    # `duration`; distance_to_go > 0.
    acceleration = constraints.max_acceleration
    deceleration = -constraints.max_deceleration
    max_velocity = constraints.max_velocity

    if abs(velocity) < EQUALITY_TOLERANCE:
        velocity = 0.0

    if velocity < 0:
        # moving away from the target: brake to rest, then start a fresh maneuver
        braking_time = -velocity / deceleration
        if braking_time >= duration:
            return _integrate(velocity, deceleration, duration)
        # v - d * (v / d) is not exactly zero in floating point
        travelled, _ = _integrate(velocity, deceleration, braking_time)
        extra, velocity = _advance(
            distance_to_go - travelled, 0.0, duration - braking_time, constraints
        )
        return travelled + extra, velocity

    stopping_distance = velocity**2 / (2.0 * deceleration)
    distance_after_accelerating = (
        distance_to_go - velocity * duration - 0.5 * acceleration * duration**2
    )

    if velocity > 0 and stopping_distance >= distance_after_accelerating:
        # slow down towards the target, holding at rest once stopped
        braking_time = velocity / deceleration
        if braking_time >= duration:
            return _integrate(velocity, -deceleration, duration)
        travelled, _ = _integrate(velocity, -deceleration, braking_time)
        return travelled, 0.0

    if velocity > max_velocity:
        throttled_logging.warning(
            f"Current velocity {velocity:.4f} exceeds the velocity limit {max_velocity:.4f}; "
            "decelerating to the limit.",
            1.0,
        )
        ramp_time = (velocity - max_velocity) / deceleration
        if ramp_time >= duration:
            return _integrate(velocity, -deceleration, duration)
        travelled, _ = _integrate(velocity, -deceleration, ramp_time)
    else:
        # speed up, cruising at the velocity limit for the rest of the period
        ramp_time = (max_velocity - velocity) / acceleration
        if ramp_time >= duration:
            return _integrate(velocity, acceleration, duration)
        travelled, _ = _integrate(velocity, acceleration, ramp_time)
    return travelled + max_velocity * (duration - ramp_time), max_velocity


class DynamicTrapezoidProfile:
    """A trapezoidal motion profile recomputed every control tick from the current state.

    Holds only the constraints; every call to `get_next_setpoint` is independent of the
    previous ones, so the target can change arbitrarily between ticks. See
    `next_trapezoid_setpoint` for the stepping rules.
    """

    def __init__(self, constraints: Constraints):
        """A trapezoidal motion profile recomputed every control tick from the current state.

        Args:
            constraints (Constraints): Velocity, acceleration and deceleration limits.
        """
        self._constraints = constraints

    @property
    def constraints(self) -> Constraints:
        return self._constraints

    def get_next_setpoint(
        self, target_position: float, current: KinematicState, control_period: float
    ) -> KinematicState:
        """Get the setpoint one control period ahead of `current`, moving towards
        `target_position`.

        Args:
            target_position (float): Position to move to.
            current (KinematicState): Current (measured) state.
            control_period (float): Time (s) until the next control tick.

        Raises:
            InvalidConfiguration: if `control_period` is not a finite positive number.

        Returns:
            KinematicState: The setpoint to command at the next control tick.
        """
        return next_trapezoid_setpoint(
            current=current,
            target_position=target_position,
            control_period=control_period,
            constraints=self._constraints,
        )
