# cluster_sizer/errors.py
from __future__ import annotations


class SizerError(ValueError):
    """Base class for input errors reported by the sizing engine."""


class InvalidTopology(SizerError):
    """Node counts or over-commit ratio out of range."""


class DegenerateInstance(SizerError):
    """
    Instance type with an all-zero footprint.

    Every dimension is unconstrained, so "how many fit" has no finite answer.
    """

    def __init__(self, instance_name: str):
        super().__init__(
            f"Instance type {instance_name!r} has an empty footprint, fit is unbounded"
        )
        self.instance_name = instance_name
