"""
Domain layer for repoprov.

Contains pure domain objects with no I/O or side effects:
- RepositoryDeclaration / ManifestResult: What the manifest declares
- ProvisionedClone: A clone materialized on disk
- ProvenanceRecord: What the store remembers about a clone
- ValidationResult: Outcome of structural checks
- ExpectedSurface / ProbeResult: Capability probe input and output
- OperationDetail / RunReport: Per-identity and aggregate run outcomes
"""

from .declaration import RepositoryDeclaration, ManifestResult, clone_key
from .clone import (
    ProvisionedClone,
    ProvenanceRecord,
    ArtifactCheck,
    ValidationResult,
    VCS_MARKER,
)
from .surface import (
    MemberKind,
    SurfaceMember,
    HashCheck,
    InstanceCheck,
    FactoryCheck,
    ExpectedSurface,
    ProbeStatus,
    ProbeCheck,
    ProbeResult,
    LIBRARY_SURFACE,
    ACTOR_SURFACE,
    MESSAGE_SURFACE,
    BUILTIN_SURFACES,
)
from .operation import OperationStatus, OperationDetail, RunReport

__all__ = [
    'RepositoryDeclaration',
    'ManifestResult',
    'clone_key',
    'ProvisionedClone',
    'ProvenanceRecord',
    'ArtifactCheck',
    'ValidationResult',
    'VCS_MARKER',
    'MemberKind',
    'SurfaceMember',
    'HashCheck',
    'InstanceCheck',
    'FactoryCheck',
    'ExpectedSurface',
    'ProbeStatus',
    'ProbeCheck',
    'ProbeResult',
    'LIBRARY_SURFACE',
    'ACTOR_SURFACE',
    'MESSAGE_SURFACE',
    'BUILTIN_SURFACES',
    'OperationStatus',
    'OperationDetail',
    'RunReport',
]
