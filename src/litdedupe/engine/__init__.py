"""Detection orchestration engine.

This package provides the main entry point for running duplicate
detection, including configuration and result types.
"""

from litdedupe.engine.config import DetectionConfig, DetectionMethod, DetectionResult
from litdedupe.engine.runner import detect

__all__ = [
    "DetectionConfig",
    "DetectionMethod",
    "DetectionResult",
    "detect",
]
