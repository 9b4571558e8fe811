"""
Legal document processing pipeline.

This module wires the three stages together:
1. Regex extraction of entities
2. Mapping onto a form
3. Queueing for approval
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pdfplumber

from .approval_workflow import ApprovalItem, ApprovalWorkflowService, Priority
from .config import Settings
from .learning import CorrectionMemory
from .mapping_service import IntelligentMappingService
from .models import MappingResult, StructuredPublication
from .regex_service import LegalRegexService

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.txt', '.pdf')


@dataclass
class PipelineResult:
    """Everything produced for one document."""
    source: str
    form_type: str
    publication: StructuredPublication
    mapping: MappingResult
    approval_item: ApprovalItem
    processing_time: float
    output_files: List[Path] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'form_type': self.form_type,
            'processing_time': self.processing_time,
            'publication': self.publication.to_dict(),
            'mapping': self.mapping.to_dict(),
            'approval_item': self.approval_item.to_dict(),
        }


class LegalDocumentPipeline:
    """
    Extract, map and queue Algerian legal documents.

    The mapping and approval services share one correction memory, so
    corrections approved by reviewers feed later mappings.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the pipeline.

        Args:
            settings: Runtime settings; read from the environment when omitted
        """
        self.settings = settings or Settings.from_env()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.correction_memory = CorrectionMemory()
        self.regex_service = LegalRegexService()
        self.mapping_service = IntelligentMappingService(
            config=self.settings.mapping_config(),
            correction_memory=self.correction_memory
        )
        self.approval_service = ApprovalWorkflowService(
            settings=self.settings.approval_settings(),
            correction_memory=self.correction_memory
        )

    def resolve_form_type(self, publication: StructuredPublication, form_type: Optional[str] = None) -> str:
        """Explicit form type, else the detected publication type, else the default."""
        if form_type:
            return form_type
        available = self.mapping_service.get_available_form_types()
        if publication.type_key and publication.type_key in available:
            return publication.type_key
        return self.settings.default_form_type

    def process_text(self,
                     text: str,
                     form_type: Optional[str] = None,
                     priority: Priority = Priority.MEDIUM,
                     document_info: Optional[Dict[str, Any]] = None,
                     source: str = "text") -> PipelineResult:
        """
        Run a text through extraction, mapping and approval.

        Raises:
            ValueError: If the form type is not supported
        """
        start_time = time.time()

        publication = self.regex_service.process_text(text)
        resolved_form = self.resolve_form_type(publication, form_type)
        mapping = self.mapping_service.map_extracted_data_to_form(publication, resolved_form)
        item = self.approval_service.create_approval_item(mapping, publication, priority, document_info)

        result = PipelineResult(
            source=source,
            form_type=resolved_form,
            publication=publication,
            mapping=mapping,
            approval_item=item,
            processing_time=time.time() - start_time
        )
        self.logger.info(
            f"Processed {source}: {publication.type} -> {resolved_form}, "
            f"item {item.id} ({item.status.value})"
        )
        return result

    def process_file(self,
                     file_path: Union[str, Path],
                     form_type: Optional[str] = None,
                     priority: Priority = Priority.MEDIUM) -> PipelineResult:
        """
        Process a .txt or .pdf file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file type is not supported
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Input file does not exist: {path}")

        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ValueError(f"Unsupported file type: {path.suffix}")

        if suffix == '.pdf':
            text, pages = self._extract_text_from_pdf(path)
        else:
            text, pages = path.read_text(encoding='utf-8'), 1

        document_info = {
            'filename': path.name,
            'pages': pages,
            'format': suffix.lstrip('.').upper(),
            'size': path.stat().st_size,
        }
        return self.process_text(text, form_type, priority, document_info, source=str(path))

    def process_files(self,
                      file_paths: List[Union[str, Path]],
                      form_type: Optional[str] = None) -> List[PipelineResult]:
        """Process several files; failures are logged and skipped."""
        results = []
        for file_path in file_paths:
            try:
                results.append(self.process_file(file_path, form_type))
            except (OSError, ValueError) as e:
                self.logger.error(f"Error processing file {file_path}: {e}")
        return results

    def save_result(self, result: PipelineResult, output_dir: Optional[Path] = None) -> Path:
        """Write a result as JSON into the output directory."""
        output_dir = Path(output_dir or self.settings.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = output_dir / f"{result.approval_item.document_id}_{timestamp}.json"
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False, default=str)

        result.output_files.append(output_path)
        self.logger.info(f"Saved result: {output_path}")
        return output_path

    def _extract_text_from_pdf(self, file_path: Path):
        """Extract the text layer of a PDF using pdfplumber."""
        text = ""
        with pdfplumber.open(file_path) as pdf:
            pages = len(pdf.pages)
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text += page_text + "\n"
        if not text.strip():
            self.logger.warning(f"No text layer found in {file_path.name}")
        return text, pages
