"""
Provisioning orchestrator for repoprov.

Drives clone -> validate -> record for every declared repository, and
probes the external library checkout on the side. Each identity owns a
disjoint directory and store key, so identities run concurrently; one
identity's failure never stops the others.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union
import logging

from ..domain import (
    ManifestResult,
    OperationDetail,
    OperationStatus,
    RepositoryDeclaration,
    RunReport,
)
from ..exit_codes import InfrastructureUnavailableError, ProvisioningError
from .clone_service import CloneManager
from .probe_service import CapabilityProbe
from .provenance_service import ProvenanceService
from .validation_service import StructuralValidator

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Runs a provisioning pass over a manifest.

    Example:
        orchestrator = Orchestrator(destination_root=Path("stores/repositories"))
        report = asyncio.run(orchestrator.run(load_manifest("stores/meta.json")))
        print(report.to_dict())
    """

    def __init__(
        self,
        destination_root: Union[str, Path],
        clone_manager: Optional[CloneManager] = None,
        validator: Optional[StructuralValidator] = None,
        provenance: Optional[ProvenanceService] = None,
        probe: Optional[CapabilityProbe] = None,
        max_concurrent: int = 4,
        timeout: Optional[float] = 120,
        required_directories: Iterable[str] = (),
        descriptor: str = "package.json"
    ):
        self.destination_root = Path(destination_root)
        self.clones = clone_manager or CloneManager(descriptor=descriptor)
        self.validator = validator or StructuralValidator()
        self.provenance = provenance or ProvenanceService()
        self.probe = probe or CapabilityProbe()
        self.max_concurrent = max(1, int(max_concurrent))
        self.timeout = timeout
        self.required_directories = tuple(required_directories)
        self.descriptor = descriptor

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        provenance: Optional[ProvenanceService] = None,
        **overrides
    ) -> 'Orchestrator':
        """Build an orchestrator from a loaded config dict."""
        from ..config import resolve_workspace_path
        from ..infra import GitClient

        workspace = config["workspace"]
        provisioning = config["provisioning"]
        validation = config["validation"]
        descriptor = validation.get("descriptor", "package.json")

        git = GitClient(timeout=provisioning.get("git_timeout_seconds", 600))
        kwargs = dict(
            destination_root=resolve_workspace_path(config, workspace["stores_dir"]) / "repositories",
            clone_manager=CloneManager(git, descriptor=descriptor, depth=provisioning.get("clone_depth", 1)),
            validator=StructuralValidator(validation.get("default_entry_point", "index.js")),
            provenance=provenance,
            max_concurrent=provisioning.get("max_concurrent_operations", 4),
            timeout=provisioning.get("timeout_seconds", 120),
            required_directories=validation.get("required_directories", []),
            descriptor=descriptor,
        )
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    async def run(self, manifest: ManifestResult) -> RunReport:
        """
        Provision every declared repository.

        Expected failures are captured per identity in the report;
        anything unexpected propagates and cancels the remaining work.
        """
        report = RunReport(malformed=len(manifest.malformed))
        declarations = list(manifest)
        if not declarations:
            return report

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def guarded(declaration: RepositoryDeclaration) -> OperationDetail:
            async with semaphore:
                return await self.provision_one(declaration)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(guarded(d)) for d in declarations]
        except ExceptionGroup as errors:
            raise errors.exceptions[0]

        for task in tasks:
            report.add_detail(task.result())
        return report

    async def provision_one(self, declaration: RepositoryDeclaration) -> OperationDetail:
        """Clone, validate and record one repository."""
        identity = declaration.identity
        try:
            clone = await asyncio.wait_for(
                self.clones.provision(
                    identity,
                    declaration.link,
                    declaration.https_link,
                    self.destination_root,
                ),
                timeout=self.timeout,
            )
        except InfrastructureUnavailableError as e:
            logger.info(f"Skipping {identity}: {e}")
            return OperationDetail(identity, OperationStatus.SKIPPED, "clone", message=str(e))
        except ProvisioningError as e:
            logger.error(f"Provisioning {identity} failed: {e}")
            return OperationDetail(identity, OperationStatus.FAILED, "clone", error=str(e))
        except asyncio.TimeoutError:
            message = f"no clone confirmation within {self.timeout}s"
            logger.error(f"Provisioning {identity} failed: {message}")
            return OperationDetail(identity, OperationStatus.FAILED, "timeout", error=message)

        required = declaration.required_directories or self.required_directories
        result = self.validator.validate(
            clone.path,
            required,
            expected_name=declaration.name,
            descriptor_name=self.descriptor,
        )
        if not result.passed:
            failing = result.failing_artifacts
            logger.error(f"Validation of {identity} failed: {', '.join(failing)}")
            return OperationDetail(
                identity,
                OperationStatus.FAILED,
                "validate",
                path=clone.path,
                error=f"missing or invalid: {', '.join(failing)}",
                failing=failing,
            )

        stored = self.provenance.record(declaration, clone)
        return OperationDetail(
            identity,
            OperationStatus.PASSED,
            "provisioned",
            path=clone.path,
            metadata={'key': clone.key, 'recorded': stored},
        )

    def check_library(
        self,
        library_path: Union[str, Path],
        expected_name: Optional[str] = None,
        required_directories: Iterable[str] = (),
        probe: bool = True
    ) -> Dict[str, Any]:
        """
        Validate and probe the external library checkout.

        A checkout that is not present is reported as skipped.
        """
        path = Path(library_path)
        outcome: Dict[str, Any] = {'type': 'library', 'path': str(path)}

        if not path.is_dir():
            outcome['status'] = OperationStatus.SKIPPED.value
            outcome['message'] = "library checkout not present"
            outcome['probes'] = []
            return outcome

        validation = self.validator.validate(
            path,
            required_directories,
            expected_name=expected_name,
            descriptor_name=self.descriptor,
        )
        outcome['validation'] = validation.to_dict()
        probes = self.probe.probe_library(path) if probe else []
        outcome['probes'] = probes

        failed = not validation.passed or any(p.failed for p in probes)
        outcome['status'] = (OperationStatus.FAILED if failed else OperationStatus.PASSED).value
        return outcome

    def attach_library(self, report: RunReport, outcome: Dict[str, Any]) -> RunReport:
        """Fold a check_library outcome into a run report."""
        report.probes.extend(outcome.get('probes', []))
        report.library = {k: v for k, v in outcome.items() if k != 'probes'}
        if outcome.get('status') == OperationStatus.FAILED.value:
            report.errors.append(f"library: {outcome['path']} failed checks")
        return report
