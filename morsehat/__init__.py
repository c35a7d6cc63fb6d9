"""Morse communicator logic, SSD1306 framebuffer, PDM audio filter, sensor conversions and USB descriptors."""

__version__ = "0.1.0"