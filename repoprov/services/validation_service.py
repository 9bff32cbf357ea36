"""
Structural validation of materialized checkouts.

Read-only inspection: every check runs and is reported on its own, so a
missing directory does not hide a broken descriptor and vice versa.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..domain import ArtifactCheck, ValidationResult

DEFAULT_DESCRIPTOR = "package.json"
DEFAULT_ENTRY_POINT = "index.js"


def _inside(root: Path, relative: str) -> bool:
    """True if relative resolves to a location within root."""
    return (root / relative).resolve().is_relative_to(root.resolve())


class StructuralValidator:
    """
    Checks a checkout for a descriptor, an entry point and required
    directories.

    Example:
        validator = StructuralValidator()
        result = validator.validate("fabric", ["types", "services"], "@fabric/core")
        if not result.passed:
            print(result.failing_artifacts)
    """

    def __init__(self, default_entry_point: str = DEFAULT_ENTRY_POINT):
        self.default_entry_point = default_entry_point

    def _read_descriptor(self, path: Path) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        if not path.is_file():
            return None, f"{path.name} not found"
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return None, f"{path.name} could not be parsed: {e}"
        if not isinstance(data, dict):
            return None, f"{path.name} is not an object"
        return data, None

    def validate(
        self,
        local_path: Union[str, Path],
        required_directories: Iterable[str] = (),
        expected_name: Optional[str] = None,
        descriptor_name: str = DEFAULT_DESCRIPTOR
    ) -> ValidationResult:
        """
        Validate a checkout.

        Args:
            local_path: Root of the checkout
            required_directories: Names that must be directories under the root
            expected_name: If given, descriptor `name` must equal it exactly
            descriptor_name: Descriptor filename at the root

        Returns:
            ValidationResult with one check per artifact
        """
        root = Path(local_path).expanduser()
        checks: List[ArtifactCheck] = []

        descriptor, problem = self._read_descriptor(root / descriptor_name)
        checks.append(ArtifactCheck(descriptor_name, descriptor is not None, problem))

        if expected_name is not None:
            actual = descriptor.get('name') if descriptor else None
            if actual == expected_name:
                checks.append(ArtifactCheck('name', True))
            else:
                checks.append(ArtifactCheck(
                    'name', False, f"expected name {expected_name!r}, found {actual!r}"
                ))

        entry = (descriptor or {}).get('main') or self.default_entry_point
        if not isinstance(entry, str):
            checks.append(ArtifactCheck('main', False, f"main is not a path: {entry!r}"))
        elif not _inside(root, entry):
            checks.append(ArtifactCheck('main', False, f"entry point {entry} is outside the checkout"))
        elif (root / entry).is_file():
            checks.append(ArtifactCheck('main', True, entry))
        else:
            checks.append(ArtifactCheck('main', False, f"entry point {entry} not found"))

        for name in required_directories:
            target = root / name
            if not _inside(root, name):
                checks.append(ArtifactCheck(name, False, f"{name} is outside the checkout"))
            elif target.is_dir():
                checks.append(ArtifactCheck(name, True))
            elif target.exists():
                checks.append(ArtifactCheck(name, False, f"{name} is not a directory"))
            else:
                checks.append(ArtifactCheck(name, False, f"{name} directory not found"))

        return ValidationResult(
            path=str(root),
            checks=tuple(checks),
            descriptor=descriptor or {},
        )
