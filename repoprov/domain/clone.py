"""
Clone, provenance and validation domain objects for repoprov.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

from .declaration import clone_key

VCS_MARKER = ".git"


@dataclass(frozen=True)
class ProvisionedClone:
    """
    A materialized clone on disk.

    Invariant: a clone that exists is only valid when it has both the
    version-control marker and the package descriptor.
    """
    identity: str
    path: str
    exists: bool = False
    has_vcs_marker: bool = False
    has_descriptor: bool = False

    @property
    def key(self) -> str:
        return clone_key(self.identity)

    @property
    def valid(self) -> bool:
        return self.exists and self.has_vcs_marker and self.has_descriptor

    @classmethod
    def inspect(cls, identity: str, path: Path, descriptor: str = "package.json") -> 'ProvisionedClone':
        """Snapshot the on-disk state of a clone directory."""
        path = Path(path)
        exists = path.is_dir()
        return cls(
            identity=identity,
            path=str(path.resolve()) if exists else str(path),
            exists=exists,
            has_vcs_marker=exists and (path / VCS_MARKER).exists(),
            has_descriptor=exists and (path / descriptor).is_file(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'identity': self.identity,
            'key': self.key,
            'path': self.path,
            'exists': self.exists,
            'has_vcs_marker': self.has_vcs_marker,
            'has_descriptor': self.has_descriptor,
        }


@dataclass(frozen=True)
class ProvenanceRecord:
    """Persisted metadata about how a clone was produced."""
    link: str
    https_link: str
    cloned: bool
    path: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            'link': self.link,
            'httpsLink': self.https_link,
            'cloned': self.cloned,
            'path': self.path,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProvenanceRecord':
        return cls(
            link=data.get('link', ''),
            https_link=data.get('httpsLink', ''),
            cloned=bool(data.get('cloned', False)),
            path=data.get('path', ''),
            timestamp=int(data.get('timestamp', 0)),
        )


@dataclass(frozen=True)
class ArtifactCheck:
    """Outcome of checking one artifact."""
    artifact: str
    passed: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'artifact': self.artifact, 'passed': self.passed}
        if self.message:
            result['message'] = self.message
        return result


@dataclass(frozen=True)
class ValidationResult:
    """Aggregated outcome of the structural checks on one checkout."""
    path: str
    checks: Tuple[ArtifactCheck, ...] = ()
    descriptor: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.checks)

    @property
    def failing_artifacts(self) -> List[str]:
        return [check.artifact for check in self.checks if not check.passed]

    def check(self, artifact: str) -> Optional[ArtifactCheck]:
        for item in self.checks:
            if item.artifact == artifact:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'validation',
            'path': self.path,
            'passed': self.passed,
            'failing': self.failing_artifacts,
            'checks': [check.to_dict() for check in self.checks],
        }
