"""
repoprov - Provision and validate declared repositories in a workspace.

Given a manifest of repository identities, repoprov makes a fresh shallow
clone of each, checks that it has the shape of a well-formed package, and
records provenance about the clone in an optional key-value store. It can
also probe the public surface of an optional external library checkout.

Quick Start:
    import asyncio
    import repoprov

    manifest = repoprov.load_manifest("stores/meta.json")
    orchestrator = repoprov.Orchestrator(destination_root="stores/repositories")
    report = asyncio.run(orchestrator.run(manifest))
    for detail in report.details:
        print(detail.identity, detail.status.value)

    # Validate a checkout directly
    result = repoprov.StructuralValidator().validate(
        "fabric", ["types", "services", "tests"], expected_name="@fabric/core"
    )

    # Probe an optional library
    probe = repoprov.CapabilityProbe()
    for outcome in probe.probe_library("fabric"):
        print(outcome.surface, outcome.status.value)

Domain Objects:
    RepositoryDeclaration - One manifest entry
    ProvisionedClone - A clone on disk
    ProvenanceRecord - What the store keeps about a clone
    ValidationResult - Per-artifact structural checks
    ProbeResult - Outcome of a capability probe
    RunReport - Per-identity outcomes and totals
"""

__version__ = "0.3.0"

from .domain import (
    RepositoryDeclaration,
    ManifestResult,
    ProvisionedClone,
    ProvenanceRecord,
    ValidationResult,
    ExpectedSurface,
    ProbeResult,
    ProbeStatus,
    OperationStatus,
    RunReport,
    LIBRARY_SURFACE,
    ACTOR_SURFACE,
    MESSAGE_SURFACE,
)

from .services import (
    CloneManager,
    StructuralValidator,
    ProvenanceService,
    open_provenance_store,
    CapabilityProbe,
    Orchestrator,
)

from .manifest import load_manifest

from .config import load_config, save_config

__all__ = [
    "__version__",
    # Domain objects
    "RepositoryDeclaration",
    "ManifestResult",
    "ProvisionedClone",
    "ProvenanceRecord",
    "ValidationResult",
    "ExpectedSurface",
    "ProbeResult",
    "ProbeStatus",
    "OperationStatus",
    "RunReport",
    "LIBRARY_SURFACE",
    "ACTOR_SURFACE",
    "MESSAGE_SURFACE",
    # Services
    "CloneManager",
    "StructuralValidator",
    "ProvenanceService",
    "open_provenance_store",
    "CapabilityProbe",
    "Orchestrator",
    "load_manifest",
    # Configuration
    "load_config",
    "save_config",
]
