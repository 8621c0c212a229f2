"""Simulated device driver and its translation boundary."""

from .boundary import DEVICE_FAILURES, DeviceBoundary, DeviceSession

__all__ = ["DEVICE_FAILURES", "DeviceBoundary", "DeviceSession"]
