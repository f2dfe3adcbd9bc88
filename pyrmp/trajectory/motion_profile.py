from typing import List, Sequence, Tuple
from bisect import bisect_right
import numpy as np

from ..core.types import EQUALITY_TOLERANCE, KinematicState, ProfilePhase


class MotionProfile:
    """A group of ProfilePhases that represents an arbitrary trajectory of compound
    accelerations, coasts and decelerations of one degree of freedom.

    A motion profile provides a time-parameterised reference (position, velocity), most
    often used as the setpoint of a feedback controller to avoid control effort saturation,
    or to keep a mechanism within its physical limits.

    This class only builds profiles out of user-defined phases. `AsymmetricTrapezoidProfile`
    and `TrapezoidProfile` extend it to create profiles out of constraints and desired states.

    Sampling is tolerant: times before the start of the profile return the initial state and
    times after its end return the final state.
    """

    def __init__(
        self,
        initial_state: KinematicState = KinematicState(),
        phases: Sequence[ProfilePhase] = (),
    ):
        """A group of ProfilePhases that represents an arbitrary trajectory.

        The phases are copied and re-anchored in time so that each phase starts where the
        previous one ends (the first one starts at t = 0).

        Args:
            initial_state (KinematicState, optional): State of the profile at t = 0.
                Defaults to KinematicState() (zero position and velocity).
            phases (Sequence[ProfilePhase], optional): Ordered phases of the profile.
                Defaults to () (a profile that always samples to its initial state).
        """
        self._initial_state = initial_state
        self._set_phases(phases)

    def _set_phases(self, phases: Sequence[ProfilePhase]):
        self._phases: Tuple[ProfilePhase, ...] = ()
        self._phase_starts: List[float] = []
        self._phase_start_positions: List[float] = []

        reference = 0.0
        position = self._initial_state.position
        anchored = []
        for phase in phases:
            phase = ProfilePhase(
                duration=phase.duration,
                acceleration=phase.acceleration,
                start_velocity=phase.start_velocity,
                start_reference=reference,
            )
            anchored.append(phase)
            self._phase_starts.append(reference)
            self._phase_start_positions.append(position)
            reference = phase.end_reference
            position += phase.displacement

        self._phases = tuple(anchored)
        self._total_time = reference
        if len(self._phases) == 0:
            self._final_state = self._initial_state
        else:
            self._final_state = KinematicState(
                position=position, velocity=self._phases[-1].end_velocity
            )

    @property
    def initial_state(self) -> KinematicState:
        """State of the profile at (and before) t = 0."""
        return self._initial_state

    @property
    def final_state(self) -> KinematicState:
        """State of the profile at (and after) `total_time()`."""
        return self._final_state

    def get_phases(self) -> Tuple[ProfilePhase, ...]:
        """Gets all the phases in the profile.

        Returns:
            Tuple[ProfilePhase, ...]: Ordered phases, with their start references resolved.
        """
        return self._phases

    def total_time(self) -> float:
        """Total time needed for the profile to finish (sum of phase durations)."""
        return self._total_time

    def is_finished(self, t: float) -> bool:
        """Returns True if the time `t` since the beginning of the profile is at or after the
        end of the profile."""
        return t >= self._total_time

    def sample(self, t: float) -> KinematicState:
        """Get the state of the profile at a given time.

        Args:
            t (float): Time since the beginning of the profile.

        Returns:
            KinematicState: Position and velocity of the profile at that time. The initial
                state if `t` < 0 (or if the profile has no phases), the final state if `t` is
                at or after `total_time()`.
        """
        if t < 0 or len(self._phases) == 0:
            return self._initial_state
        if t >= self._total_time:
            return self._final_state

        # boundary times resolve to the phase that starts there
        idx = bisect_right(self._phase_starts, t) - 1
        phase = self._phases[idx]
        tau = t - phase.start_reference
        return KinematicState(
            position=self._phase_start_positions[idx] + phase.displacement_at(tau),
            velocity=phase.velocity_at(tau),
        )

    def time_left_until(self, position: float) -> float | None:
        """Get the earliest time (since the beginning of the profile) at which the profile
        passes through the given position.

        Args:
            position (float): The position to look for.

        Returns:
            float | None: The time at which `position` is first reached, or None if the
                profile never reaches it.
        """
        if abs(position - self._initial_state.position) < EQUALITY_TOLERANCE:
            return 0.0
        for phase, start_position in zip(self._phases, self._phase_start_positions):
            tau = _earliest_time_to_displacement(phase, position - start_position)
            if tau is not None:
                return phase.start_reference + tau
        return None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(initial_state={self._initial_state}, "
            f"phases={list(self._phases)})"
        )


def _earliest_time_to_displacement(phase: ProfilePhase, displacement: float) -> float | None:
    # smallest tau in [0, duration] with start_velocity*tau + 0.5*acceleration*tau^2 == disp
    if abs(phase.acceleration) < 1e-12:
        if abs(phase.start_velocity) < 1e-12:
            return 0.0 if abs(displacement) < EQUALITY_TOLERANCE else None
        candidates = [displacement / phase.start_velocity]
    else:
        discriminant = phase.start_velocity**2 + 2.0 * phase.acceleration * displacement
        if discriminant < 0:
            return None
        root = np.sqrt(discriminant)
        candidates = [
            (-phase.start_velocity - root) / phase.acceleration,
            (-phase.start_velocity + root) / phase.acceleration,
        ]
    valid = [
        float(np.clip(tau, 0.0, phase.duration))
        for tau in candidates
        if -EQUALITY_TOLERANCE <= tau <= phase.duration + EQUALITY_TOLERANCE
    ]
    return min(valid) if len(valid) > 0 else None
