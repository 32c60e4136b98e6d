import pytest

from darwinframe import registers
from darwinframe.registers import (
    FSRAddress,
    FallState,
    JointId,
    MX28Address,
    angle_to_value,
    mirror_angle,
    mirror_value,
    value_to_angle,
)


def test_zero_angle_is_center():
    assert angle_to_value(0.0) == registers.CENTER_VALUE


def test_center_is_zero_angle():
    assert value_to_angle(registers.CENTER_VALUE) == 0.0


@pytest.mark.parametrize("angle", [-0.05, 0.05])
def test_angle_to_value_truncates_toward_zero(angle):
    assert angle_to_value(angle) == 2048


@pytest.mark.parametrize("angle", [-180.0, -90.0, -12.5, 0.0, 33.3, 90.0, 180.0])
def test_angle_round_trip_is_close(angle):
    assert value_to_angle(angle_to_value(angle)) == pytest.approx(angle, abs=0.3)


def test_angle_to_value_is_monotonic():
    values = [angle_to_value(a) for a in range(-180, 181, 10)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


@pytest.mark.parametrize("value", [0, 1, 1000, 2048, 4095])
def test_mirror_value_is_involution(value):
    assert mirror_value(mirror_value(value)) == value


def test_mirror_value_maps_center_to_center():
    assert mirror_value(registers.CENTER_VALUE) == registers.CENTER_VALUE


def test_mirror_angle_negates():
    assert mirror_angle(30.5) == -30.5
    assert mirror_angle(mirror_angle(-7.0)) == -7.0


def test_mirrored_value_gives_opposite_angle():
    value = angle_to_value(45.0)
    assert value_to_angle(mirror_value(value)) == pytest.approx(-value_to_angle(value), abs=0.1)


def test_mx28_address_lookup_by_value():
    assert MX28Address(30) is MX28Address.P_GOAL_POSITION_L
    assert MX28Address(36) is MX28Address.P_PRESENT_POSITION_L
    assert MX28Address(68) is MX28Address.MAXNUM_ADDRESS


def test_fsr_address_lookup_by_value():
    assert FSRAddress(26) is FSRAddress.P_FSR1_L
    assert FSRAddress(48) is FSRAddress.MAXNUM_ADDRESS


def test_joint_id_lookup_by_value():
    assert JointId(20) is JointId.HEAD_TILT
    with pytest.raises(ValueError):
        JointId(registers.NUMBER_OF_JOINTS)


def test_fall_state_values():
    assert FallState(-1) is FallState.BACKWARD
    assert FallState(1) is FallState.FORWARD
    with pytest.raises(ValueError):
        FallState(2)