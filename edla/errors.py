"""
Exception classes for the error diffusion engine.

Exception Hierarchy:
  EDError (base)
  ├── ConfigurationError - Inconsistent topology or parameter values
  └── PatternShapeError  - Pattern length does not match the topology

Numerical saturation of the sigmoid (derivative terms of exactly 0) is a
normal steady state of the algorithm and is never reported as an error.
"""


class EDError(Exception):
    """Base exception for all engine errors."""


class ConfigurationError(EDError):
    """
    Invalid configuration parameters.

    Raised at construction time when dimensions or learning parameters are
    out of range, e.g. a negative hidden width or more output networks than
    MAX_OUTPUT_NETWORKS.
    """


class PatternShapeError(EDError, ValueError):
    """Input or target pattern length does not match the network topology."""
