"""
Service layer for repoprov.

Contains business logic that orchestrates domain objects and infrastructure:
- CloneManager: Fresh shallow clones at deterministic paths
- StructuralValidator: Descriptor, entry point and directory checks
- ProvenanceService: Best-effort provenance records
- CapabilityProbe: Declared-surface checks of an optional library
- Orchestrator: Drives all of the above over a manifest

Services are the primary API for commands to use.
"""

from .clone_service import CloneManager
from .validation_service import StructuralValidator
from .provenance_service import (
    ProvenanceService,
    ProvenanceStore,
    FileProvenanceStore,
    UnavailableProvenanceStore,
    open_provenance_store,
)
from .probe_service import CapabilityProbe, load_module_reference
from .orchestrator import Orchestrator

__all__ = [
    'CloneManager',
    'StructuralValidator',
    'ProvenanceService',
    'ProvenanceStore',
    'FileProvenanceStore',
    'UnavailableProvenanceStore',
    'open_provenance_store',
    'CapabilityProbe',
    'load_module_reference',
    'Orchestrator',
]
