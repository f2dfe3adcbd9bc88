import pytest
import numpy as np
from pyrmp.core.types import Constraints, KinematicState, ProfilePhase
from pyrmp.trajectory import AsymmetricTrapezoidProfile, TrapezoidProfile
from pyrmp.utils.profile_utils import max_phase_discontinuity, sample_profile

EPSILON = 1e-4


class TestAsymmetricTrapezoidProfileTriangle:

    @pytest.fixture(scope="class")
    def profile(self):
        return AsymmetricTrapezoidProfile(
            Constraints(10, 1, -2), KinematicState(2, 0), KinematicState(1, 0)
        )

    def test_phases(self, profile: AsymmetricTrapezoidProfile):
        assert profile.shape == "triangle"
        assert list(profile.get_phases()) == [
            ProfilePhase(1.1547005383792515, 1.0, 0.0, 0.0),
            ProfilePhase(0.5773502691896257, -2.0, 1.1547005383792515, 1.1547005383792515),
        ]

    def test_total_time(self, profile: AsymmetricTrapezoidProfile):
        assert profile.total_time() == pytest.approx(1.7320508075688772, abs=EPSILON)

    def test_sample(self, profile: AsymmetricTrapezoidProfile):
        assert profile.sample(0) == KinematicState(1.0, 0.0)
        assert profile.sample(0.5) == KinematicState(1.125, 0.5)
        assert profile.sample(1.1) == KinematicState(1.605, 1.1)
        assert profile.sample(1.5) == KinematicState(1.9461524227066316, 0.4641016151377544)
        assert profile.sample(2.0) == KinematicState(2.0, 0.0)

    def test_peak_velocity_below_limit(self, profile: AsymmetricTrapezoidProfile):
        _, _, velocities = sample_profile(profile, dt=0.01)
        assert np.max(np.abs(velocities)) < 10


class TestAsymmetricTrapezoidProfileTrapezoid:

    @pytest.fixture(scope="class")
    def profile(self):
        return AsymmetricTrapezoidProfile(
            Constraints(2, 1, -2), KinematicState(-1, 0), KinematicState(3, 0)
        )

    def test_phases(self, profile: AsymmetricTrapezoidProfile):
        assert profile.shape == "trapezoid"
        assert profile.direction == -1.0
        assert list(profile.get_phases()) == [
            ProfilePhase(2.0, -1.0, 0.0, 0.0),
            ProfilePhase(0.5, 0.0, -2.0, 2.0),
            ProfilePhase(1.0, 2.0, -2.0, 2.5),
        ]

    def test_total_time(self, profile: AsymmetricTrapezoidProfile):
        assert profile.total_time() == pytest.approx(3.5, abs=EPSILON)

    def test_sample(self, profile: AsymmetricTrapezoidProfile):
        assert profile.sample(0) == KinematicState(3.0, 0.0)
        assert profile.sample(0.5) == KinematicState(2.875, -0.5)
        assert profile.sample(1.1) == KinematicState(2.395, -1.1)
        assert profile.sample(3.0) == KinematicState(-0.75, -1.0)
        assert profile.sample(3.5) == KinematicState(-1.0, 0.0)

    def test_is_finished(self, profile: AsymmetricTrapezoidProfile):
        assert not profile.is_finished(3.4999)
        assert profile.is_finished(3.5)

    def test_sample_out_of_range(self, profile: AsymmetricTrapezoidProfile):
        assert profile.sample(-1) == KinematicState(3.0, 0.0)
        assert profile.sample(10) == KinematicState(-1.0, 0.0)


class TestAsymmetricTrapezoidProfileEdgeCases:

    def test_ramp_profile(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(10, 1, -2), KinematicState(1, 0), KinematicState(0, 3)
        )
        assert profile.shape == "ramp"
        assert list(profile.get_phases()) == [ProfilePhase(0.6666666666666666, -4.5, 3.0, 0.0)]
        assert profile.sample(profile.total_time()) == KinematicState(1.0, 0.0)

    def test_unreachable_target_velocity(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(10, 1, -2), KinematicState(2, 4), KinematicState(0, 0)
        )
        assert profile.shape == "ramp"
        assert len(profile.get_phases()) == 1
        # accelerate the whole way at the limit
        assert profile.final_state == KinematicState(2.0, 2.0)
        assert profile.total_time() == pytest.approx(2.0)

    def test_zero_displacement_with_matching_velocities(self):
        initial = KinematicState(4, 0)
        profile = AsymmetricTrapezoidProfile(Constraints(1, 1), KinematicState(4, 0), initial)
        assert profile.shape == "none"
        assert profile.get_phases() == ()
        assert profile.total_time() == 0.0
        for t in [-1.0, 0.0, 0.5, 10.0]:
            assert profile.sample(t) == initial

    def test_start_at_max_velocity_omits_acceleration_phase(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(2, 1, -1), KinematicState(10, 0), KinematicState(0, 2)
        )
        phases = profile.get_phases()
        assert len(phases) == 2
        assert phases[0].acceleration == pytest.approx(0.0)
        assert phases[1].acceleration == pytest.approx(-1.0)
        assert profile.total_time() == pytest.approx(4.0 + 2.0)

    def test_end_at_max_velocity_omits_deceleration_phase(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(2, 1, -1), KinematicState(10, 2), KinematicState(0, 0)
        )
        phases = profile.get_phases()
        assert len(phases) == 2
        assert phases[0].acceleration == pytest.approx(1.0)
        assert phases[1].acceleration == pytest.approx(0.0)
        assert profile.final_state == KinematicState(10, 2)

    def test_boundary_velocities_are_conformed_to_limit(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(2, 1, -1), KinematicState(10, 0), KinematicState(0, 5)
        )
        assert profile.initial_state == KinematicState(0, 2)
        assert profile.sample(-1) == KinematicState(0, 2)

    def test_initial_velocity_away_from_target(self):
        profile = AsymmetricTrapezoidProfile(
            Constraints(5, 1, -1), KinematicState(1, 0), KinematicState(0, -1)
        )
        assert profile.final_state == KinematicState(1, 0)
        # moves backwards before heading to the target
        assert profile.sample(0.5).position < 0.0
        assert max_phase_discontinuity(profile) < EPSILON

    def test_default_initial_state(self):
        profile = AsymmetricTrapezoidProfile(Constraints(2, 1), KinematicState(4, 0))
        assert profile.initial_state == KinematicState(0, 0)
        assert profile.final_state == KinematicState(4, 0)

    def test_accessors(self):
        constraints = Constraints(2, 1, -3)
        target = KinematicState(4, 0)
        profile = AsymmetricTrapezoidProfile(constraints, target)
        assert profile.constraints == constraints
        assert profile.target == target
        assert profile.direction == 1.0


@pytest.mark.parametrize(
    "constraints, target, initial",
    [
        (Constraints(10, 1, -2), KinematicState(2, 0), KinematicState(1, 0)),
        (Constraints(2, 1, -2), KinematicState(-1, 0), KinematicState(3, 0)),
        (Constraints(3, 2, -0.5), KinematicState(20, 1), KinematicState(-5, -1)),
        (Constraints(1.5, 4, -1), KinematicState(-7, -0.5), KinematicState(2, 1)),
        (Constraints(5, 3, -3), KinematicState(0, -2), KinematicState(40, -5)),
        (Constraints(10, 1, -2), KinematicState(1, 0), KinematicState(0, 3)),
    ],
)
class TestAsymmetricTrapezoidProfileProperties:

    def test_continuity_across_phases(self, constraints, target, initial):
        profile = AsymmetricTrapezoidProfile(constraints, target, initial)
        assert max_phase_discontinuity(profile) < EPSILON
        for phase in profile.get_phases():
            before = profile.sample(phase.start_reference - 1e-7)
            after = profile.sample(phase.start_reference)
            assert abs(before.position - after.position) < EPSILON
            assert abs(before.velocity - after.velocity) < EPSILON

    def test_ends_at_target_position(self, constraints, target, initial):
        profile = AsymmetricTrapezoidProfile(constraints, target, initial)
        assert profile.final_state.position == pytest.approx(target.position, abs=EPSILON)
        assert profile.sample(profile.total_time() + 1.0) is profile.final_state

    def test_velocity_limit_respected(self, constraints, target, initial):
        profile = AsymmetricTrapezoidProfile(constraints, target, initial)
        _, _, velocities = sample_profile(profile, dt=0.005, extra_time=1.0)
        assert np.all(np.abs(velocities) <= constraints.max_velocity + EPSILON)

    def test_is_finished_only_at_end(self, constraints, target, initial):
        profile = AsymmetricTrapezoidProfile(constraints, target, initial)
        total = profile.total_time()
        for t in np.linspace(0.0, total, 10, endpoint=False):
            assert not profile.is_finished(t)
        assert profile.is_finished(total)
        assert profile.is_finished(total + 1)


class TestTrapezoidProfile:

    def test_agrees_with_asymmetric_trapezoid_profile(self):
        symmetrical = TrapezoidProfile(Constraints(5, 3), KinematicState(0, 5), KinematicState(40, 2))
        asymmetrical = AsymmetricTrapezoidProfile(
            Constraints(5, 3, 3), KinematicState(0, 5), KinematicState(40, 2)
        )
        assert symmetrical.total_time() == pytest.approx(asymmetrical.total_time(), abs=EPSILON)

        total = symmetrical.total_time()
        for t in list(range(int(np.ceil(total)))) + [total, total + 1]:
            assert symmetrical.sample(t) == asymmetrical.sample(t)

    def test_ignores_deceleration_limit(self):
        symmetrical = TrapezoidProfile(Constraints(2, 1, -5), KinematicState(10, 0))
        assert symmetrical.constraints == Constraints(2, 1, -1)
        assert symmetrical.get_phases()[-1].acceleration == pytest.approx(-1.0)

    @pytest.mark.parametrize(
        "target, initial",
        [
            (KinematicState(2, 0), KinematicState(1, 0)),
            (KinematicState(-30, 1), KinematicState(3, 0.5)),
            (KinematicState(0, 0), KinematicState(0, 0)),
        ],
    )
    def test_agrees_at_every_sampled_time(self, target, initial):
        symmetrical = TrapezoidProfile(Constraints(4, 2), target, initial)
        asymmetrical = AsymmetricTrapezoidProfile(Constraints(4, 2, -2), target, initial)
        for t in np.arange(0.0, symmetrical.total_time() + 1.0, 0.05):
            assert symmetrical.sample(t) == asymmetrical.sample(t)
