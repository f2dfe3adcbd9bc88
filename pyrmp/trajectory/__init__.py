"""Motion profile generators: a generic phase aggregator, closed-form (a)symmetric trapezoid
planners, an incremental per-tick trapezoid planner and a clock-driven profile follower."""

from .motion_profile import MotionProfile
from .trapezoid_profile import AsymmetricTrapezoidProfile, TrapezoidProfile
from .dynamic_trapezoid_profile import DynamicTrapezoidProfile, next_trapezoid_setpoint
from .profile_follower import TrapezoidProfileFollower
