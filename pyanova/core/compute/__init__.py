"""
Shared compute infrastructure for PyAnova.

IMPORTANT: This is NOT where analysis kernels live. Those go in the
analysis subpackages (e.g. anova/_ss.py). This module contains shared
infrastructure only.

Submodules:
    timing: Execution timing utilities
"""

from pyanova.core.compute.timing import Timer

__all__ = [
    # Timing
    "Timer",
]
