"""Program synthesis over small colour grids: a grid DSL, search strategies and learned transforms."""

__version__ = "0.1.0"

__all__ = [
    "bidir",
    "cellular",
    "compression",
    "dsl",
    "enumeration",
    "evolve",
    "fingerprint",
    "grid",
    "heuristics",
    "object_ops",
    "smart_prims",
]