"""
Approval workflow for mapped Algerian legal documents.

Every mapping result is queued as an ApprovalItem before final registration.
Items above the confidence threshold are approved automatically; the others
wait for a reviewer, who can correct fields, approve or reject. Approved
corrections are remembered and reused by later mappings.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .learning import CorrectionMemory
from .models import MappedField, MappingResult, MappingSource, MappingStatus, StructuredPublication

logger = logging.getLogger(__name__)


class ApprovalStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNDER_REVIEW = "under_review"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(Priority).index(self) + 1

    def raised(self) -> 'Priority':
        """Next priority level, URGENT stays URGENT."""
        members = list(Priority)
        return members[min(members.index(self) + 1, len(members) - 1)]


class CommentType(Enum):
    COMMENT = "comment"
    CORRECTION = "correction"
    APPROVAL = "approval"
    REJECTION = "rejection"


class HistoryAction(Enum):
    CREATED = "created"
    ASSIGNED = "assigned"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"
    CORRECTED = "corrected"
    ESCALATED = "escalated"


class BatchStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PARTIAL = "partial"


class ReviewAction(Enum):
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CORRECTION = "request_correction"


OPEN_STATUSES = (ApprovalStatus.PENDING, ApprovalStatus.UNDER_REVIEW)

REVIEWER_BY_TYPE = {
    'loi': 'legal_reviewer',
    'decret': 'legal_reviewer',
    'arrete': 'admin_reviewer',
    'journal_officiel': 'official_reviewer',
}
DEFAULT_REVIEWER = 'general_reviewer'
UNASSIGNED = 'unassigned'


def _generate_id(prefix: str = "approval") -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass
class ApprovalComment:
    id: str
    author: str
    content: str
    timestamp: datetime
    type: CommentType = CommentType.COMMENT
    field_id: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'author': self.author,
            'content': self.content,
            'timestamp': self.timestamp.isoformat(),
            'type': self.type.value,
            'field_id': self.field_id,
            'old_value': self.old_value,
            'new_value': self.new_value,
        }


@dataclass
class FieldCorrection:
    """A reviewer's correction of one field."""
    field_id: str
    new_value: str
    old_value: str = ""
    reason: str = ""


@dataclass
class ApprovalItem:
    """A mapped document waiting for (or past) review."""
    id: str
    document_id: str
    document_type: str
    document_type_key: Optional[str]
    form_id: str
    mapped_fields: List[MappedField]
    unmapped_fields: List[str]
    suggested_mappings: List[MappedField]
    overall_confidence: float
    status: ApprovalStatus
    priority: Priority
    created_at: datetime
    updated_at: datetime
    submitted_at: datetime
    assigned_to: str = UNASSIGNED
    reviewer: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    comments: List[ApprovalComment] = field(default_factory=list)
    original_document: Dict[str, Any] = field(default_factory=dict)
    processing_metadata: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_field(self, field_id: str) -> Optional[MappedField]:
        for mapped in self.mapped_fields:
            if mapped.field_id == field_id:
                return mapped
        return None

    def get_suggestion(self, field_id: str) -> Optional[MappedField]:
        for suggestion in self.suggested_mappings:
            if suggestion.field_id == field_id:
                return suggestion
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'document_id': self.document_id,
            'document_type': self.document_type,
            'document_type_key': self.document_type_key,
            'form_id': self.form_id,
            'mapped_fields': [f.to_dict() for f in self.mapped_fields],
            'unmapped_fields': list(self.unmapped_fields),
            'suggested_mappings': [f.to_dict() for f in self.suggested_mappings],
            'overall_confidence': self.overall_confidence,
            'status': self.status.value,
            'priority': self.priority.value,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'submitted_at': self.submitted_at.isoformat(),
            'assigned_to': self.assigned_to,
            'reviewer': self.reviewer,
            'reviewed_at': self.reviewed_at.isoformat() if self.reviewed_at else None,
            'reviewed_by': self.reviewed_by,
            'comments': [c.to_dict() for c in self.comments],
            'original_document': dict(self.original_document),
            'processing_metadata': dict(self.processing_metadata),
            'metadata': dict(self.metadata),
        }


@dataclass
class ApprovalBatch:
    id: str
    name: str
    items: List[ApprovalItem]
    assigned_to: str
    priority: Priority = Priority.MEDIUM
    status: BatchStatus = BatchStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ApprovalHistory:
    item_id: str
    action: HistoryAction
    timestamp: datetime
    user: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ApprovalSettings:
    auto_assignment: bool = True
    notification_enabled: bool = True
    escalation_timeout: float = 48  # hours
    require_double_validation: bool = False
    confidence_threshold: float = 0.8
    batch_processing_enabled: bool = True
    learning_mode_enabled: bool = True


class ApprovalWorkflowService:
    """In-memory approval queue with review, batch and learning support."""

    LOW_CONFIDENCE = 0.6
    CORRECTION_BONUS = 0.1

    def __init__(self,
                 settings: Optional[ApprovalSettings] = None,
                 correction_memory: Optional[CorrectionMemory] = None):
        self.settings = settings or ApprovalSettings()
        self.correction_memory = correction_memory if correction_memory is not None else CorrectionMemory()
        self.approval_queue: List[ApprovalItem] = []
        self.approval_batches: List[ApprovalBatch] = []
        self.approval_history: List[ApprovalHistory] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Queue entry
    # ------------------------------------------------------------------

    def create_approval_item(self,
                             mapping_result: MappingResult,
                             publication: StructuredPublication,
                             priority: Priority = Priority.MEDIUM,
                             document_info: Optional[Dict[str, Any]] = None) -> ApprovalItem:
        """
        Queue a mapping result for approval.

        Args:
            mapping_result: Output of the mapping service
            publication: Publication the mapping was built from
            priority: Requested priority; may be raised, never lowered
            document_info: Original file details (filename, pages, format, size)

        Returns:
            The queued ApprovalItem
        """
        now = datetime.now()
        size = self._document_size(publication)
        original_document = {
            'filename': f"document_{int(now.timestamp() * 1000)}.txt",
            'pages': 1,
            'format': 'TXT',
            'size': size,
        }
        original_document.update(document_info or {})

        item = ApprovalItem(
            id=_generate_id(),
            document_id=self._document_id(publication),
            document_type=publication.type,
            document_type_key=publication.type_key,
            form_id=mapping_result.form_id,
            mapped_fields=list(mapping_result.mapped_fields),
            unmapped_fields=list(mapping_result.unmapped_fields),
            suggested_mappings=list(mapping_result.suggested_mappings),
            overall_confidence=mapping_result.overall_confidence,
            status=self._initial_status(mapping_result.overall_confidence),
            priority=self._determine_priority(mapping_result, priority),
            created_at=now,
            updated_at=now,
            submitted_at=now,
            assigned_to=self._auto_assign_reviewer(publication.type_key),
            original_document=original_document,
            processing_metadata={
                'algorithm_used': 'AlgerianLegalRegex',
                'extraction_time': mapping_result.processing_time,
            },
            metadata={
                'processing_time': mapping_result.processing_time,
                'entities_extracted': len(publication.entities),
                'fields_mapped': len(mapping_result.mapped_fields),
                'fields_unmapped': len(mapping_result.unmapped_fields),
                'document_size': size,
                'language': publication.language,
                'warnings': list(mapping_result.warnings),
            }
        )
        if item.status == ApprovalStatus.APPROVED:
            item.reviewed_at = now
            item.reviewed_by = 'system'
            item.metadata['auto_approved'] = True

        self.approval_queue.append(item)
        self._add_to_history(item.id, HistoryAction.CREATED, 'system', {'document_type': publication.type})
        self._notify(item, f"created with status {item.status.value}")

        self.logger.info(
            f"Approval item created: {item.id}, status {item.status.value}, priority {item.priority.value}"
        )
        return item

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def review_mapping(self,
                       item_id: str,
                       reviewer: str,
                       corrections: List[Union[FieldCorrection, Dict[str, Any]]]) -> ApprovalItem:
        """
        Apply a reviewer's corrections to an item.

        Raises:
            ValueError: If the item is unknown or already rejected
        """
        item = self._get_item(item_id)
        if item.status == ApprovalStatus.REJECTED:
            raise ValueError(f"Cannot review rejected item: {item_id}")

        now = datetime.now()
        for correction in corrections:
            if isinstance(correction, dict):
                correction = FieldCorrection(**correction)
            old_value = self._apply_correction(item, correction)

            item.comments.append(ApprovalComment(
                id=_generate_id("comment"),
                author=reviewer,
                content=correction.reason or "Correction manuelle",
                timestamp=now,
                type=CommentType.CORRECTION,
                field_id=correction.field_id,
                old_value=correction.old_value or old_value,
                new_value=correction.new_value
            ))
            self._add_to_history(item_id, HistoryAction.CORRECTED, reviewer, {
                'field_id': correction.field_id,
                'new_value': correction.new_value,
            })

        item.overall_confidence = self._overall_confidence(item.mapped_fields)
        item.status = self._recalculate_status(item)
        item.updated_at = now
        item.reviewer = reviewer
        item.reviewed_at = now
        item.reviewed_by = reviewer

        self._add_to_history(item_id, HistoryAction.REVIEWED, reviewer, {'corrections': len(corrections)})
        if item.status == ApprovalStatus.APPROVED and self.settings.learning_mode_enabled:
            self._learn_from_approval(item)
        self._refresh_batches(item)

        self.logger.info(f"Mapping reviewed: {item_id}, {len(corrections)} corrections applied")
        return item

    def _apply_correction(self, item: ApprovalItem, correction: FieldCorrection) -> str:
        """Apply one correction and return the replaced value."""
        mapped = item.get_field(correction.field_id)
        if mapped:
            old_value = mapped.mapped_value
            mapped.mapped_value = correction.new_value
            mapped.confidence = min(mapped.confidence + self.CORRECTION_BONUS, 1.0)
            mapped.status = MappingStatus.MAPPED
            mapped.source = MappingSource.MANUAL
            mapped.metadata['corrected'] = True
            return old_value

        # Promote a suggestion or fill an unmapped field
        suggestion = item.get_suggestion(correction.field_id)
        item.mapped_fields.append(MappedField(
            field_id=correction.field_id,
            field_name=suggestion.field_name if suggestion else correction.field_id,
            original_value=suggestion.original_value if suggestion else "",
            mapped_value=correction.new_value,
            confidence=1.0,
            status=MappingStatus.MAPPED,
            source=MappingSource.MANUAL,
            metadata={'corrected': True, 'promoted_from_suggestion': suggestion is not None}
        ))
        item.suggested_mappings = [s for s in item.suggested_mappings if s.field_id != correction.field_id]
        item.unmapped_fields = [f for f in item.unmapped_fields if f != correction.field_id]
        return suggestion.mapped_value if suggestion else ""

    def approve_item(self, item_id: str, approver: str, comments: Optional[str] = None) -> ApprovalItem:
        """
        Approve a pending or under-review item.

        Raises:
            ValueError: If the item is unknown or not open for approval
        """
        item = self._get_item(item_id)
        self._check_open(item, "approve")

        now = datetime.now()
        item.status = ApprovalStatus.APPROVED
        item.updated_at = now
        item.reviewer = approver
        item.reviewed_at = now
        item.reviewed_by = approver

        if comments:
            item.comments.append(ApprovalComment(
                id=_generate_id("comment"),
                author=approver,
                content=comments,
                timestamp=now,
                type=CommentType.APPROVAL
            ))

        self._add_to_history(item_id, HistoryAction.APPROVED, approver, {
            'overall_confidence': item.overall_confidence,
        })
        if self.settings.learning_mode_enabled:
            self._learn_from_approval(item)
        self._refresh_batches(item)
        self._notify(item, f"approved by {approver}")

        self.logger.info(f"Item approved: {item_id}")
        return item

    def reject_item(self, item_id: str, rejector: str, reason: str) -> ApprovalItem:
        """
        Reject a pending or under-review item.

        Raises:
            ValueError: If the item is unknown or not open for rejection
        """
        item = self._get_item(item_id)
        self._check_open(item, "reject")

        now = datetime.now()
        item.status = ApprovalStatus.REJECTED
        item.updated_at = now
        item.reviewer = rejector
        item.reviewed_at = now
        item.reviewed_by = rejector

        item.comments.append(ApprovalComment(
            id=_generate_id("comment"),
            author=rejector,
            content=reason,
            timestamp=now,
            type=CommentType.REJECTION
        ))

        self._add_to_history(item_id, HistoryAction.REJECTED, rejector, {'reason': reason})
        self._refresh_batches(item)
        self._notify(item, f"rejected by {rejector}")

        self.logger.info(f"Item rejected: {item_id}")
        return item

    def process_review_action(self,
                              item_id: str,
                              action: Union[ReviewAction, str],
                              reviewer_id: str,
                              comments: Optional[str] = None,
                              corrections: Optional[Dict[str, str]] = None) -> bool:
        """
        Dispatch a reviewer action.

        Args:
            item_id: Item to act on
            action: approve, reject or request_correction
            reviewer_id: Acting reviewer
            comments: Free text; the rejection reason for reject
            corrections: Field id to corrected value, applied before approval

        Returns:
            False if the item is unknown, True otherwise
        """
        item = self._find_item(item_id)
        if item is None:
            return False

        action = ReviewAction(action)
        if action == ReviewAction.REQUEST_CORRECTION:
            self._check_open(item, "request a correction on")
        if corrections:
            self.review_mapping(item_id, reviewer_id, [
                FieldCorrection(field_id=field_id, new_value=value)
                for field_id, value in corrections.items()
            ])

        if action == ReviewAction.APPROVE:
            if item.status in OPEN_STATUSES:
                self.approve_item(item_id, reviewer_id, comments)
        elif action == ReviewAction.REJECT:
            self.reject_item(item_id, reviewer_id, comments or "Rejected")
        else:
            item.status = ApprovalStatus.UNDER_REVIEW
            item.updated_at = datetime.now()
            item.metadata['correction_requested'] = True
            if comments:
                item.comments.append(ApprovalComment(
                    id=_generate_id("comment"),
                    author=reviewer_id,
                    content=comments,
                    timestamp=item.updated_at
                ))
            self._add_to_history(item_id, HistoryAction.REVIEWED, reviewer_id, {'correction_requested': True})

        return True

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def create_approval_batch(self,
                              items: List[ApprovalItem],
                              assigned_to: str,
                              priority: Priority = Priority.MEDIUM) -> ApprovalBatch:
        """
        Group similar items for a single reviewer.

        Raises:
            ValueError: If batch processing is disabled, no items are given
                or an item is already approved or rejected
        """
        if not self.settings.batch_processing_enabled:
            raise ValueError("Batch processing is disabled")
        if not items:
            raise ValueError("Cannot create an empty approval batch")
        for item in items:
            self._check_open(item, "batch")

        now = datetime.now()
        batch = ApprovalBatch(
            id=_generate_id("batch"),
            name=f"Batch {now.date().isoformat()} - {len(items)} items",
            items=list(items),
            assigned_to=assigned_to,
            priority=priority,
            created_at=now,
            metadata={
                'total_items': len(items),
                'approved_items': 0,
                'rejected_items': 0,
                'average_confidence': sum(i.overall_confidence for i in items) / len(items),
            }
        )

        for item in items:
            item.status = ApprovalStatus.UNDER_REVIEW
            item.assigned_to = assigned_to
            item.updated_at = now
            self._add_to_history(item.id, HistoryAction.ASSIGNED, 'system', {
                'batch_id': batch.id,
                'assigned_to': assigned_to,
            })

        self.approval_batches.append(batch)
        self.logger.info(f"Approval batch created: {batch.id} with {len(items)} items")
        return batch

    def batch_approve(self, min_confidence: float, reviewer_id: str) -> List[str]:
        """Approve every pending item at or above min_confidence."""
        eligible = [
            item for item in self.approval_queue
            if item.status == ApprovalStatus.PENDING and item.overall_confidence >= min_confidence
        ]
        for item in eligible:
            self.approve_item(item.id, reviewer_id)
        return [item.id for item in eligible]

    def _refresh_batches(self, item: ApprovalItem) -> None:
        for batch in self.approval_batches:
            if any(i.id == item.id for i in batch.items):
                self._update_batch_status(batch)

    @staticmethod
    def _update_batch_status(batch: ApprovalBatch) -> None:
        approved = sum(1 for i in batch.items if i.status == ApprovalStatus.APPROVED)
        rejected = sum(1 for i in batch.items if i.status == ApprovalStatus.REJECTED)
        total = len(batch.items)

        batch.metadata['approved_items'] = approved
        batch.metadata['rejected_items'] = rejected

        if approved == total:
            batch.status = BatchStatus.APPROVED
        elif rejected == total:
            batch.status = BatchStatus.REJECTED
        elif approved or rejected:
            batch.status = BatchStatus.PARTIAL
        else:
            batch.status = BatchStatus.PENDING

        if approved + rejected == total and batch.completed_at is None:
            batch.completed_at = datetime.now()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_approval_history(self, item_id: str) -> List[ApprovalHistory]:
        return [h for h in self.approval_history if h.item_id == item_id]

    def get_pending_items(self, assigned_to: Optional[str] = None) -> List[ApprovalItem]:
        """Open items, highest priority first, then oldest first."""
        items = [item for item in self.approval_queue if item.status in OPEN_STATUSES]
        if assigned_to:
            items = [item for item in items if item.assigned_to == assigned_to]
        return sorted(items, key=lambda i: (-i.priority.rank, i.created_at))

    def get_queue_items(self) -> List[ApprovalItem]:
        return self.approval_queue

    def get_item(self, item_id: str) -> ApprovalItem:
        return self._get_item(item_id)

    def get_approval_stats(self) -> Dict[str, Any]:
        queue = self.approval_queue
        total = len(queue)
        return {
            'total_items': total,
            'pending_items': sum(1 for i in queue if i.status in OPEN_STATUSES),
            'approved_items': sum(1 for i in queue if i.status == ApprovalStatus.APPROVED),
            'rejected_items': sum(1 for i in queue if i.status == ApprovalStatus.REJECTED),
            'average_confidence': sum(i.overall_confidence for i in queue) / total if total else 0.0,
            'average_processing_time': sum(i.metadata.get('processing_time', 0.0) for i in queue) / total if total else 0.0,
        }

    def get_approval_stats_extended(self) -> Dict[str, Any]:
        queue = self.approval_queue
        total = len(queue)
        approved = sum(1 for i in queue if i.status == ApprovalStatus.APPROVED)

        review_hours = [
            (i.reviewed_at - i.submitted_at).total_seconds() / 3600
            for i in queue
            if i.reviewed_at and i.reviewed_by and i.reviewed_by != 'system'
        ]

        return {
            'total': total,
            'pending': sum(1 for i in queue if i.status == ApprovalStatus.PENDING),
            'approved': approved,
            'rejected': sum(1 for i in queue if i.status == ApprovalStatus.REJECTED),
            'under_review': sum(1 for i in queue if i.status == ApprovalStatus.UNDER_REVIEW),
            'needs_correction': sum(
                1 for i in queue
                if i.status in OPEN_STATUSES and (i.unmapped_fields or i.metadata.get('correction_requested'))
            ),
            'auto_approval_rate': (approved / total) * 100 if total else 0.0,
            'average_review_time': sum(review_hours) / len(review_hours) if review_hours else 0.0,
        }

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def update_approval_settings(self, **changes) -> ApprovalSettings:
        """
        Update settings in place.

        Raises:
            ValueError: On unknown keys or out-of-range values
        """
        known = {f.name for f in dataclass_fields(ApprovalSettings)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown approval settings: {', '.join(sorted(unknown))}")

        threshold = changes.get('confidence_threshold', self.settings.confidence_threshold)
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"confidence_threshold must be between 0 and 1, got {threshold}")
        if changes.get('escalation_timeout', self.settings.escalation_timeout) <= 0:
            raise ValueError("escalation_timeout must be positive")

        for key, value in changes.items():
            setattr(self.settings, key, value)
        self.logger.info(f"Approval settings updated: {changes}")
        return self.settings

    def escalate_overdue_items(self, now: Optional[datetime] = None) -> List[ApprovalItem]:
        """Raise the priority of open items waiting longer than the escalation timeout."""
        now = now or datetime.now()
        timeout = timedelta(hours=self.settings.escalation_timeout)
        escalated = []

        for item in self.approval_queue:
            if item.status not in OPEN_STATUSES or item.priority == Priority.URGENT:
                continue
            last_escalation = item.metadata.get('escalated_at')
            since = datetime.fromisoformat(last_escalation) if last_escalation else item.submitted_at
            if now - since < timeout:
                continue

            previous = item.priority
            item.priority = previous.raised()
            item.updated_at = now
            item.metadata['escalated_at'] = now.isoformat()
            self._add_to_history(item.id, HistoryAction.ESCALATED, 'system', {
                'from': previous.value,
                'to': item.priority.value,
            })
            self._notify(item, f"escalated to {item.priority.value}")
            escalated.append(item)

        if escalated:
            self.logger.info(f"Escalated {len(escalated)} overdue approval items")
        return escalated

    def cleanup_old_items(self, days_old: int = 30) -> int:
        """Drop items that are no longer pending and were not updated recently."""
        cutoff = datetime.now() - timedelta(days=days_old)
        initial_count = len(self.approval_queue)
        self.approval_queue = [
            item for item in self.approval_queue
            if item.updated_at > cutoff or item.status == ApprovalStatus.PENDING
        ]
        removed = initial_count - len(self.approval_queue)
        self.logger.info(f"Cleaned up {removed} old approval items")
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_item(self, item_id: str) -> Optional[ApprovalItem]:
        for item in self.approval_queue:
            if item.id == item_id:
                return item
        return None

    def _get_item(self, item_id: str) -> ApprovalItem:
        item = self._find_item(item_id)
        if item is None:
            raise ValueError(f"Approval item not found: {item_id}")
        return item

    @staticmethod
    def _check_open(item: ApprovalItem, verb: str) -> None:
        if item.status not in OPEN_STATUSES:
            raise ValueError(f"Cannot {verb} item {item.id} in status {item.status.value}")

    def _initial_status(self, confidence: float) -> ApprovalStatus:
        if confidence >= self.settings.confidence_threshold:
            if self.settings.require_double_validation:
                return ApprovalStatus.UNDER_REVIEW
            return ApprovalStatus.APPROVED
        return ApprovalStatus.PENDING

    def _recalculate_status(self, item: ApprovalItem) -> ApprovalStatus:
        if not item.unmapped_fields and item.overall_confidence >= self.settings.confidence_threshold:
            if self.settings.require_double_validation:
                return ApprovalStatus.UNDER_REVIEW
            return ApprovalStatus.APPROVED
        return ApprovalStatus.PENDING

    def _determine_priority(self, mapping_result: MappingResult, requested: Priority) -> Priority:
        low_confidence = mapping_result.overall_confidence < self.LOW_CONFIDENCE
        mostly_unmapped = len(mapping_result.unmapped_fields) > len(mapping_result.mapped_fields)
        if (low_confidence or mostly_unmapped) and requested.rank < Priority.HIGH.rank:
            return Priority.HIGH
        return requested

    def _auto_assign_reviewer(self, type_key: Optional[str]) -> str:
        if not self.settings.auto_assignment:
            return UNASSIGNED
        return REVIEWER_BY_TYPE.get(type_key or "", DEFAULT_REVIEWER)

    @staticmethod
    def _overall_confidence(mapped_fields: List[MappedField]) -> float:
        if not mapped_fields:
            return 0.0
        return sum(f.confidence for f in mapped_fields) / len(mapped_fields)

    @staticmethod
    def _document_id(publication: StructuredPublication) -> str:
        suffix = publication.number or str(int(time.time() * 1000))
        return f"doc_{publication.type_key or 'inconnu'}_{suffix}"

    @staticmethod
    def _document_size(publication: StructuredPublication) -> int:
        return len(publication.content) + sum(len(a) for a in publication.articles)

    def _learn_from_approval(self, item: ApprovalItem) -> None:
        """Remember approved corrections so later mappings reuse them."""
        learned = 0
        for comment in item.comments:
            if comment.type != CommentType.CORRECTION or not comment.field_id:
                continue
            mapped = item.get_field(comment.field_id)
            if mapped and mapped.original_value:
                self.correction_memory.record(mapped.field_id, mapped.original_value, mapped.mapped_value)
                learned += 1
        if learned:
            self.logger.debug(f"Learned {learned} corrections from {item.id}")

    def _add_to_history(self, item_id: str, action: HistoryAction, user: str, details: Dict[str, Any]) -> None:
        self.approval_history.append(ApprovalHistory(
            item_id=item_id,
            action=action,
            timestamp=datetime.now(),
            user=user,
            details=details
        ))

    def _notify(self, item: ApprovalItem, event: str) -> None:
        if self.settings.notification_enabled:
            self.logger.info(f"Notification to {item.assigned_to}: item {item.id} {event}")
