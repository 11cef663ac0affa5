"""
Recording pipeline: stage orchestration and job management
"""

from .orchestrator import PipelineOrchestrator, apply_report_defaults
from .service import PipelineService

__all__ = ["PipelineOrchestrator", "PipelineService", "apply_report_defaults"]
