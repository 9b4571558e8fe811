"""
Extraction, form mapping and approval of Algerian legal texts.
"""

from .approval_workflow import ApprovalWorkflowService, ApprovalSettings, ApprovalStatus, Priority
from .mapping_service import IntelligentMappingService
from .pipeline import LegalDocumentPipeline, PipelineResult
from .regex_service import LegalRegexService
from .registry import FormRegistry

__all__ = [
    'ApprovalWorkflowService',
    'ApprovalSettings',
    'ApprovalStatus',
    'Priority',
    'IntelligentMappingService',
    'LegalDocumentPipeline',
    'PipelineResult',
    'LegalRegexService',
    'FormRegistry',
]
