"""Simulated control loop that follows a moving goal.

Two ways of generating setpoints in a control loop are shown:

    - `TrapezoidProfileFollower`: plans a static profile and replans (from the current
        setpoint) whenever the goal changes. Elapsed time is measured with a clock; here a
        `ManualClock` is advanced by one control period per tick to simulate the loop.
    - `DynamicTrapezoidProfile`: computes only the next setpoint every tick from the current
        state, so no plan is stored and the goal can change at any tick.

The "actuator" is assumed to track the setpoints perfectly (the setpoint is fed back as the
current state).
"""

from pyrmp.core.types import Constraints, KinematicState
from pyrmp.core.logging import set_log_level
from pyrmp.trajectory import DynamicTrapezoidProfile, TrapezoidProfileFollower
from pyrmp.utils.time_utils import ManualClock

CONTROL_PERIOD: float = 0.1
NUM_TICKS: int = 60

if __name__ == "__main__":
    # show replanning messages
    set_log_level("DEBUG")

    constraints = Constraints(max_velocity=1.0, max_acceleration=1.0, max_deceleration=-2.0)

    clock = ManualClock()
    follower = TrapezoidProfileFollower(constraints=constraints, clock=clock)
    dynamic_profile = DynamicTrapezoidProfile(constraints=constraints)
    dynamic_state = KinematicState()

    for tick in range(NUM_TICKS):
        # the goal jumps half-way through the loop
        goal_position = 3.0 if tick < NUM_TICKS // 2 else -1.0

        follower.set_goal(KinematicState(position=goal_position))
        follower_setpoint = follower.get_setpoint()

        dynamic_state = dynamic_profile.get_next_setpoint(
            target_position=goal_position,
            current=dynamic_state,
            control_period=CONTROL_PERIOD,
        )

        print(
            f"t={clock.get_time():5.2f}  goal={goal_position:5.2f}  "
            f"follower=({follower_setpoint.position:7.4f}, {follower_setpoint.velocity:7.4f})  "
            f"dynamic=({dynamic_state.position:7.4f}, {dynamic_state.velocity:7.4f})"
        )
        clock.advance(CONTROL_PERIOD)
