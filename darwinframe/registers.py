"""Register maps, joint ids and position conversions of the servo network."""

from __future__ import annotations

from enum import IntEnum

# Position range of an MX-28 servo (4096 steps per turn).
MIN_VALUE = 0
CENTER_VALUE = 2048
MAX_VALUE = 4095
MIN_ANGLE = -180.0
MAX_ANGLE = 180.0
RATIO_VALUE2ANGLE = 0.088
RATIO_ANGLE2VALUE = 11.378
PARAM_BYTES = 7

# Foot pressure sensor ids on the bus.
ID_R_FSR = 111
ID_L_FSR = 112

NUMBER_OF_JOINTS = 21

P_GAIN_DEFAULT = 32
I_GAIN_DEFAULT = 0
D_GAIN_DEFAULT = 0

FALLEN_F_LIMIT = 390
FALLEN_B_LIMIT = 580
FALLEN_MAX_COUNT = 30


def angle_to_value(angle: float) -> int:
    """Servo position for ``angle`` degrees, truncated toward zero."""
    return int(angle * RATIO_ANGLE2VALUE) + CENTER_VALUE


def value_to_angle(value: int) -> float:
    """Angle in degrees for the servo position ``value``."""
    return float(value - CENTER_VALUE) * RATIO_VALUE2ANGLE


def mirror_value(value: int) -> int:
    """Position of the mirrored joint on the other side of the body."""
    return MAX_VALUE + 1 - value


def mirror_angle(angle: float) -> float:
    """Angle of the mirrored joint on the other side of the body."""
    return -angle


class MX28Address(IntEnum):
    """Control table addresses of an MX-28 servo."""

    P_MODEL_NUMBER_L = 0
    P_MODEL_NUMBER_H = 1
    P_VERSION = 2
    P_ID = 3
    P_BAUD_RATE = 4
    P_RETURN_DELAY_TIME = 5
    P_CW_ANGLE_LIMIT_L = 6
    P_CW_ANGLE_LIMIT_H = 7
    P_CCW_ANGLE_LIMIT_L = 8
    P_CCW_ANGLE_LIMIT_H = 9
    P_SYSTEM_DATA2 = 10
    P_HIGH_LIMIT_TEMPERATURE = 11
    P_LOW_LIMIT_VOLTAGE = 12
    P_HIGH_LIMIT_VOLTAGE = 13
    P_MAX_TORQUE_L = 14
    P_MAX_TORQUE_H = 15
    P_RETURN_LEVEL = 16
    P_ALARM_LED = 17
    P_ALARM_SHUTDOWN = 18
    P_OPERATING_MODE = 19
    P_LOW_CALIBRATION_L = 20
    P_LOW_CALIBRATION_H = 21
    P_HIGH_CALIBRATION_L = 22
    P_HIGH_CALIBRATION_H = 23
    P_TORQUE_ENABLE = 24
    P_LED = 25
    P_D_GAIN = 26
    P_I_GAIN = 27
    P_P_GAIN = 28
    P_RESERVED = 29
    P_GOAL_POSITION_L = 30
    P_GOAL_POSITION_H = 31
    P_MOVING_SPEED_L = 32
    P_MOVING_SPEED_H = 33
    P_TORQUE_LIMIT_L = 34
    P_TORQUE_LIMIT_H = 35
    P_PRESENT_POSITION_L = 36
    P_PRESENT_POSITION_H = 37
    P_PRESENT_SPEED_L = 38
    P_PRESENT_SPEED_H = 39
    P_PRESENT_LOAD_L = 40
    P_PRESENT_LOAD_H = 41
    P_PRESENT_VOLTAGE = 42
    P_PRESENT_TEMPERATURE = 43
    P_REGISTERED_INSTRUCTION = 44
    P_PAUSE_TIME = 45
    P_MOVING = 46
    P_LOCK = 47
    P_PUNCH_L = 48
    P_PUNCH_H = 49
    P_RESERVED4 = 50
    P_RESERVED5 = 51
    P_POT_L = 52
    P_POT_H = 53
    P_PWM_OUT_L = 54
    P_PWM_OUT_H = 55
    P_P_ERROR_L = 56
    P_P_ERROR_H = 57
    P_I_ERROR_L = 58
    P_I_ERROR_H = 59
    P_D_ERROR_L = 60
    P_D_ERROR_H = 61
    P_P_ERROR_OUT_L = 62
    P_P_ERROR_OUT_H = 63
    P_I_ERROR_OUT_L = 64
    P_I_ERROR_OUT_H = 65
    P_D_ERROR_OUT_L = 66
    P_D_ERROR_OUT_H = 67
    MAXNUM_ADDRESS = 68


class FSRAddress(IntEnum):
    """Control table addresses of a foot pressure sensor board."""

    P_MODEL_NUMBER_L = 0
    P_MODEL_NUMBER_H = 1
    P_VERSION = 2
    P_ID = 3
    P_BAUD_RATE = 4
    P_RETURN_DELAY_TIME = 5
    P_RETURN_LEVEL = 16
    P_OPERATING_MODE = 19
    P_LED = 25
    P_FSR1_L = 26
    P_FSR1_H = 27
    P_FSR2_L = 28
    P_FSR2_H = 29
    P_FSR3_L = 30
    P_FSR3_H = 31
    P_FSR4_L = 32
    P_FSR4_H = 33
    P_FSR_X = 34
    P_FSR_Y = 35
    P_PRESENT_VOLTAGE = 42
    P_REGISTERED_INSTRUCTION = 44
    P_LOCK = 47
    MAXNUM_ADDRESS = 48


class JointId(IntEnum):
    """Bus ids of the robot's joints."""

    R_SHOULDER_PITCH = 1
    L_SHOULDER_PITCH = 2
    R_SHOULDER_ROLL = 3
    L_SHOULDER_ROLL = 4
    R_ELBOW = 5
    L_ELBOW = 6
    R_HIP_YAW = 7
    L_HIP_YAW = 8
    R_HIP_ROLL = 9
    L_HIP_ROLL = 10
    R_HIP_PITCH = 11
    L_HIP_PITCH = 12
    R_KNEE = 13
    L_KNEE = 14
    R_ANKLE_PITCH = 15
    L_ANKLE_PITCH = 16
    R_ANKLE_ROLL = 17
    L_ANKLE_ROLL = 18
    HEAD_PAN = 19
    HEAD_TILT = 20


class FallState(IntEnum):
    """Whether the robot stands or has fallen, and in which direction."""

    BACKWARD = -1
    STANDUP = 0
    FORWARD = 1