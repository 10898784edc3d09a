[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sun3boot"
version = "0.1.0"
description = "Sun-3 boot monitor helpers: a minimal printf, a serial console, hex dumps, Ethernet/ARP/IP framing, LANCE structures and a TFTP network loader"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sun3",
    "boot",
    "tftp",
    "arp",
    "rarp",
    "lance",
    "am7990",
    "ethernet",
    "netboot",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Boot",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sun3boot"]

[tool.pytest.ini_options]
addopts = "-ra"
