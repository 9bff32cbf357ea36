"""
Declared-surface descriptors for capability probing.

A surface lists the members an external module is expected to expose and
what kind each one is. The probe walks this data instead of enumerating
the module, so what gets checked is explicit and testable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class MemberKind(Enum):
    """Expected kind of a surface member."""
    CONSTRUCTIBLE = "constructible"
    CALLABLE = "callable"
    DATA = "data"


@dataclass(frozen=True)
class SurfaceMember:
    name: str
    kind: MemberKind = MemberKind.CALLABLE


@dataclass(frozen=True)
class HashCheck:
    """Call `function` with `sample` and expect a hex digest of `length`."""
    function: str
    sample: str = "test"
    length: int = 64


@dataclass(frozen=True)
class InstanceCheck:
    """Construct the export with `kwargs` and look for instance members."""
    kwargs: Tuple[Tuple[str, Any], ...] = ()
    members: Tuple[SurfaceMember, ...] = ()


@dataclass(frozen=True)
class FactoryCheck:
    """Call a static factory with `args` and look for members on the result."""
    factory: str
    args: Tuple[Any, ...] = ()
    members: Tuple[SurfaceMember, ...] = ()


@dataclass(frozen=True)
class ExpectedSurface:
    """
    Declared public surface of one module.

    Attributes:
        name: Short label used in reports
        module: Module path relative to the library checkout
                ("" for the checkout itself)
        export: Attribute holding the root type
        static_members: Members expected on the root type
        hash_checks: Functional checks of digest helpers
        instance: Optional construction check
        factory: Optional static-factory check
    """
    name: str
    export: str
    module: str = ""
    static_members: Tuple[SurfaceMember, ...] = ()
    hash_checks: Tuple[HashCheck, ...] = ()
    instance: Optional[InstanceCheck] = None
    factory: Optional[FactoryCheck] = None


class ProbeStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ProbeCheck:
    name: str
    passed: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'check': self.name, 'passed': self.passed}
        if self.message:
            result['message'] = self.message
        return result


@dataclass
class ProbeResult:
    """Outcome of probing one surface."""
    surface: str
    module_path: str
    status: ProbeStatus = ProbeStatus.PASSED
    reason: Optional[str] = None
    checks: List[ProbeCheck] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.status == ProbeStatus.SKIPPED

    @property
    def failed(self) -> bool:
        return self.status == ProbeStatus.FAILED

    @property
    def failing_checks(self) -> List[str]:
        return [check.name for check in self.checks if not check.passed]

    def add(self, name: str, passed: bool, message: Optional[str] = None) -> bool:
        """Record a check; a failing check fails the probe."""
        self.checks.append(ProbeCheck(name, passed, message))
        if not passed and self.status != ProbeStatus.SKIPPED:
            self.status = ProbeStatus.FAILED
        return passed

    def skip(self, reason: str) -> 'ProbeResult':
        self.status = ProbeStatus.SKIPPED
        self.reason = reason
        return self

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'type': 'probe',
            'surface': self.surface,
            'module_path': self.module_path,
            'status': self.status.value,
            'checks': [check.to_dict() for check in self.checks],
        }
        if self.reason:
            result['reason'] = self.reason
        if self.failing_checks:
            result['failing'] = self.failing_checks
        return result


_C = MemberKind.CONSTRUCTIBLE
_F = MemberKind.CALLABLE
_D = MemberKind.DATA

LIBRARY_SURFACE = ExpectedSurface(
    name="library",
    export="Fabric",
    static_members=(
        SurfaceMember("Service", _C),
        SurfaceMember("State", _C),
        SurfaceMember("sha256", _F),
        SurfaceMember("random", _F),
    ),
    hash_checks=(HashCheck("sha256", "test", 64),),
)

ACTOR_SURFACE = ExpectedSurface(
    name="actor",
    module="types/actor",
    export="Actor",
    instance=InstanceCheck(
        kwargs=(("name", "test-actor"), ("type", "Test")),
        members=(
            SurfaceMember("settings", _D),
            SurfaceMember("_state", _D),
            SurfaceMember("on", _F),
            SurfaceMember("emit", _F),
        ),
    ),
)

MESSAGE_SURFACE = ExpectedSurface(
    name="message",
    module="types/message",
    export="Message",
    static_members=(
        SurfaceMember("fromVector", _F),
        SurfaceMember("fromRaw", _F),
    ),
    factory=FactoryCheck(
        factory="fromVector",
        args=(("GenericMessage", '{"test": "data"}'),),
        members=(
            SurfaceMember("toObject", _F),
            SurfaceMember("toRaw", _F),
        ),
    ),
)

BUILTIN_SURFACES = {
    surface.name: surface
    for surface in (LIBRARY_SURFACE, ACTOR_SURFACE, MESSAGE_SURFACE)
}
