[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "morsehat"
version = "0.1.0"
description = "Morse code communicator logic, SSD1306 framebuffer, PDM audio filter, sensor conversions and USB descriptors for a microcontroller sensor hat"
requires-python = ">=3.10"
dependencies = []
keywords = ["morse", "ssd1306", "pdm", "pcm", "imu", "usb-descriptors", "cdc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
morsehat = "morsehat.app:main"

[tool.hatch.build.targets.wheel]
packages = ["morsehat"]

[tool.pytest.ini_options]
addopts = "-ra"
