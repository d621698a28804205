"""Automated clock-in/clock-out and shift approval for the 962200 station service"""

__version__ = "0.3.0"
