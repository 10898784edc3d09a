"""Sun-3 boot monitor helpers: formatting, console, dumps, packets, LANCE structures and TFTP boot."""

__version__ = "0.1.0"

__all__ = [
    "console",
    "dump",
    "ether",
    "fmt",
    "inet",
    "lance",
    "netif",
    "params",
    "textutil",
    "tftp",
]