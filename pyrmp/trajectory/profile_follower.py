from .trapezoid_profile import AsymmetricTrapezoidProfile
from ..core.types import Constraints, KinematicState
from ..utils.time_utils import ClockBase, PythonPerfClock
from ..core.logging import logger


class TrapezoidProfileFollower:
    """Times an AsymmetricTrapezoidProfile against a clock, replanning when the goal changes.

    The active profile is cached between ticks; it is only replanned (from the current
    setpoint, so the reference stays continuous) when `set_goal` is called with a goal that
    differs from the active one.

    NOTE: This class keeps mutable state and is not thread-safe.
    """

    def __init__(
        self,
        constraints: Constraints,
        initial_state: KinematicState = KinematicState(),
        clock: ClockBase = PythonPerfClock(),
    ):
        """Times an AsymmetricTrapezoidProfile against a clock.

        Args:
            constraints (Constraints): Limits used for every (re)planned profile.
            initial_state (KinematicState, optional): State to hold until a goal is set.
                Defaults to KinematicState() (zero position and velocity).
            clock (ClockBase, optional): Clock used to measure elapsed profile time.
                Defaults to PythonPerfClock().
        """
        self._constraints = constraints
        self._clock = clock
        self.reset(initial_state)

    def reset(self, state: KinematicState):
        """Discard the active profile and hold `state` (goal becomes `state` itself)."""
        self._goal = state
        self._start_time = self._clock.get_time()
        self._profile = AsymmetricTrapezoidProfile(
            constraints=self._constraints, target=state, initial=state
        )

    @property
    def constraints(self) -> Constraints:
        return self._constraints

    @property
    def clock(self) -> ClockBase:
        return self._clock

    @property
    def goal(self) -> KinematicState:
        """The goal of the active profile."""
        return self._goal

    @property
    def profile(self) -> AsymmetricTrapezoidProfile:
        """The active profile."""
        return self._profile

    def elapsed_time(self) -> float:
        """Time (s) since the active profile was planned."""
        return self._clock.get_time() - self._start_time

    def set_goal(self, goal: KinematicState) -> bool:
        """Set a new goal. Replans from the current setpoint if the goal has changed.

        Args:
            goal (KinematicState): Desired final state.

        Returns:
            bool: True if a new profile was planned.
        """
        if goal == self._goal:
            return False
        now = self._clock.get_time()
        current = self._profile.sample(now - self._start_time)
        self._profile = AsymmetricTrapezoidProfile(
            constraints=self._constraints, target=goal, initial=current
        )
        self._goal = goal
        self._start_time = now
        logger.debug(
            f"{self.__class__.__name__}: replanned from {current} to {goal} "
            f"({self._profile.total_time():.4f}s)."
        )
        return True

    def get_setpoint(self) -> KinematicState:
        """Sample the active profile at the current elapsed time."""
        return self._profile.sample(self.elapsed_time())

    def is_finished(self) -> bool:
        """True if the active profile has reached its goal."""
        return self._profile.is_finished(self.elapsed_time())
