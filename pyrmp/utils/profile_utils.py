from typing import Tuple
import numpy as np

from ..core.types import Constraints, KinematicState
from ..core.exceptions import InvalidConfiguration
from ..trajectory.motion_profile import MotionProfile
from ..trajectory.dynamic_trapezoid_profile import next_trapezoid_setpoint


def sample_profile(
    profile: MotionProfile, dt: float, extra_time: float = 0.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample a motion profile at uniform time intervals (e.g. for plotting or logging).

    Args:
        profile (MotionProfile): The profile to sample.
        dt (float): Sampling interval in seconds.
        extra_time (float, optional): Additional time to sample after the end of the profile.
            Defaults to 0.0.

    Raises:
        InvalidConfiguration: if `dt` is not positive.

    Returns:
        Tuple[np.ndarray, np.ndarray, np.ndarray]: times, positions and velocities. Shape: (n,)
            each, where the first sample is at t = 0 and the last one at
            `profile.total_time() + extra_time`.
    """
    if dt <= 0:
        raise InvalidConfiguration(f"Sampling interval should be greater than 0, got {dt}.")
    end_time = profile.total_time() + max(extra_time, 0.0)
    times = np.arange(0.0, end_time, dt)
    times = np.append(times, end_time)
    states = [profile.sample(t) for t in times]
    return (
        times,
        np.array([state.position for state in states]),
        np.array([state.velocity for state in states]),
    )


def rollout_dynamic_profile(
    constraints: Constraints,
    initial: KinematicState,
    target_position: float,
    control_period: float,
    num_steps: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Feed successive dynamic trapezoid setpoints back as the current state (i.e. assume
    perfect tracking), as a control loop would.

    Args:
        constraints (Constraints): Velocity, acceleration and deceleration limits.
        initial (KinematicState): State at the first tick.
        target_position (float): Position to move to.
        control_period (float): Time (s) between ticks.
        num_steps (int): Number of setpoints to generate.

    Returns:
        Tuple[np.ndarray, np.ndarray]: positions and velocities of the generated setpoints.
            Shape: (num_steps,) each (the initial state is not included).
    """
    positions = np.zeros(num_steps)
    velocities = np.zeros(num_steps)
    state = initial
    for n in range(num_steps):
        state = next_trapezoid_setpoint(
            current=state,
            target_position=target_position,
            control_period=control_period,
            constraints=constraints,
        )
        positions[n] = state.position
        velocities[n] = state.velocity
    return positions, velocities


def max_phase_discontinuity(profile: MotionProfile) -> float:
    """Get the largest velocity jump across the phase boundaries of a profile (including the
    jump from the initial state into the first phase).

    Positions cannot jump: `MotionProfile` anchors every phase at the end position of the
    previous one.

    Args:
        profile (MotionProfile): The profile to check.

    Returns:
        float: Largest absolute velocity jump. 0.0 for a profile with no phases.
    """
    max_velocity_jump = 0.0
    previous_end_velocity = profile.initial_state.velocity
    for phase in profile.get_phases():
        max_velocity_jump = max(max_velocity_jump, abs(phase.start_velocity - previous_end_velocity))
        previous_end_velocity = phase.end_velocity
    return max_velocity_jump
