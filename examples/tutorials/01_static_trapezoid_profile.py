"""Plan a trapezoidal motion profile once and sample it at arbitrary times.

A static profile is computed from the constraints, a target state and an initial state
(usually the current state of the actuator). It is then sampled with the time elapsed since
the profile was planned, typically once per control tick, to get the position and velocity
setpoints to send to a controller.

Compare the symmetric `TrapezoidProfile` with the `AsymmetricTrapezoidProfile`, where the
final (braking) phase uses a gentler deceleration limit than the initial phase.
"""

from pyrmp.core.types import Constraints, KinematicState
from pyrmp.trajectory import AsymmetricTrapezoidProfile, TrapezoidProfile
from pyrmp.utils.profile_utils import sample_profile

if __name__ == "__main__":
    initial = KinematicState(position=0.0, velocity=0.0)
    target = KinematicState(position=5.0, velocity=0.0)

    # symmetric: acceleration and deceleration are both limited to 2 m/s^2
    profile = TrapezoidProfile(
        constraints=Constraints(max_velocity=2.0, max_acceleration=2.0),
        target=target,
        initial=initial,
    )
    # asymmetric: braking is limited to 0.5 m/s^2, so the last phase takes longer
    asymmetric_profile = AsymmetricTrapezoidProfile(
        constraints=Constraints(max_velocity=2.0, max_acceleration=2.0, max_deceleration=-0.5),
        target=target,
        initial=initial,
    )

    for name, p in [("symmetric", profile), ("asymmetric", asymmetric_profile)]:
        print(f"\n{name} ({p.shape}): total time {p.total_time():.3f}s")
        for phase in p.get_phases():
            print(f"    {phase}")

        # sample at 4 Hz, including half a second after the profile has finished
        times, positions, velocities = sample_profile(p, dt=0.25, extra_time=0.5)
        for t, x, v in zip(times, positions, velocities):
            print(f"    t={t:6.3f}  x={x:7.4f}  v={v:7.4f}")

        # time at which the actuator will have covered half the distance
        print(f"    half-way at t={p.time_left_until(target.position / 2):.3f}s")
