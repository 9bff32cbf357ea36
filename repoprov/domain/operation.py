"""
Operation result domain objects for repoprov.

Per-identity outcomes of a provisioning run and the report that
aggregates them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class OperationStatus(Enum):
    """Status of one identity's unit of work."""
    PASSED = "passed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class OperationDetail:
    """
    What happened to one declared repository during a run.
    """
    identity: str
    status: OperationStatus
    action: str  # "provisioned", "clone", "validate", "timeout"
    path: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    failing: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': 'repository',
            'identity': self.identity,
            'status': self.status.value,
            'action': self.action,
        }
        if self.path:
            result['path'] = self.path
        if self.message:
            result['message'] = self.message
        if self.error:
            result['error'] = self.error
        if self.failing:
            result['failing'] = list(self.failing)
        if self.metadata:
            result.update(self.metadata)
        return result


@dataclass
class RunReport:
    """
    Summary of a provisioning run across all declared repositories.

    A run never aborts because of one identity; `success` is the
    aggregate pass/fail.
    """
    operation: str = "provision"
    total: int = 0
    passed: int = 0
    skipped: int = 0
    failed: int = 0
    malformed: int = 0
    details: List[OperationDetail] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    probes: List[Any] = field(default_factory=list)
    library: Optional[Dict[str, Any]] = None

    @property
    def success(self) -> bool:
        """True if no identity, library check or probe failed."""
        if self.library and self.library.get('status') == OperationStatus.FAILED.value:
            return False
        return self.failed == 0 and not any(p.failed for p in self.probes)

    def add_detail(self, detail: OperationDetail) -> None:
        """Add an outcome and update counts."""
        self.details.append(detail)
        self.total += 1

        if detail.status == OperationStatus.PASSED:
            self.passed += 1
        elif detail.status == OperationStatus.SKIPPED:
            self.skipped += 1
        elif detail.status == OperationStatus.FAILED:
            self.failed += 1
            if detail.error:
                self.errors.append(f"{detail.identity}: {detail.error}")

    def detail(self, identity: str) -> Optional[OperationDetail]:
        for item in self.details:
            if item.identity == identity:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'operation': self.operation,
            'total': self.total,
            'passed': self.passed,
            'skipped': self.skipped,
            'failed': self.failed,
            'malformed': self.malformed,
            'success': self.success,
            'errors': self.errors,
        }
