[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtpcodec"
version = "0.1.0"
description = "RTP header extensions and AV1 RTP payloading and depayloading"
requires-python = ">=3.10"
dependencies = []
keywords = ["rtp", "av1", "obu", "webrtc", "leb128", "packetizer", "header-extension"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rtpcodec"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
