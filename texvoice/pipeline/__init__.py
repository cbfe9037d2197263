"""texvoice pipeline package.

This package contains orchestration and helper modules for pipeline execution,
stage telemetry, run identity, and manifest persistence.
"""

from .orchestrator import TexvoicePipeline

__all__ = ["TexvoicePipeline"]
