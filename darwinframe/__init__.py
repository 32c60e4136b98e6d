"""Geometry, INI settings files, servo register maps and a CM-730 bus client for a humanoid robot."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "ini",
    "inifile",
    "registers",
    "protocol",
    "cm730",
    "motion_timer",
]