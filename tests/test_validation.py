"""Tests for StructuralValidator."""

import json

import pytest

from repoprov.services import StructuralValidator
from helpers import write_package


@pytest.fixture
def validator():
    return StructuralValidator()


class TestStructuralValidator:

    def test_complete_package_passes(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", directories=["types", "services"])

        result = validator.validate(root, ["types", "services"])

        assert result.passed
        assert [c.artifact for c in result.checks] == ["package.json", "main", "types", "services"]

    def test_missing_required_directory_is_named(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", directories=["services"])

        result = validator.validate(root, ["types", "services"])

        assert not result.passed
        assert result.failing_artifacts == ["types"]
        assert result.check("package.json").passed
        assert result.check("main").passed

    def test_every_check_runs_when_descriptor_missing(self, validator, tmp_path):
        root = tmp_path / "empty"
        root.mkdir()

        result = validator.validate(root, ["types"])

        assert result.failing_artifacts == ["package.json", "main", "types"]

    def test_entry_point_defaults_when_main_absent(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", descriptor={"name": "demo"}, main="index.js")

        result = validator.validate(root)

        assert result.passed
        assert result.check("main").message == "index.js"

    def test_declared_entry_point_must_exist(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", main=None)
        (root / "package.json").write_text(json.dumps({"name": "demo", "main": "lib/start.js"}))

        result = validator.validate(root)

        assert result.failing_artifacts == ["main"]
        assert "lib/start.js" in result.check("main").message

    def test_absolute_entry_point_outside_checkout_fails(self, validator, tmp_path):
        elsewhere = tmp_path / "elsewhere.js"
        elsewhere.write_text("module.exports = {};\n")
        root = write_package(tmp_path / "pkg", descriptor={"name": "demo", "main": str(elsewhere)})

        result = validator.validate(root)

        assert result.failing_artifacts == ["main"]
        assert "outside the checkout" in result.check("main").message

    def test_required_directory_outside_checkout_fails(self, validator, tmp_path):
        (tmp_path / "sibling").mkdir()
        root = write_package(tmp_path / "pkg")

        result = validator.validate(root, ["../sibling"])

        assert result.failing_artifacts == ["../sibling"]
        assert "outside the checkout" in result.check("../sibling").message

    def test_custom_default_entry_point(self, tmp_path):
        root = write_package(tmp_path / "pkg", descriptor={"name": "demo"}, main="main.py")

        result = StructuralValidator(default_entry_point="main.py").validate(root)

        assert result.passed

    def test_expected_name_mismatch(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", name="fabric")

        result = validator.validate(root, expected_name="@fabric/core")

        assert result.failing_artifacts == ["name"]
        assert "@fabric/core" in result.check("name").message

    def test_expected_name_is_exact(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", name="@fabric/core")

        assert validator.validate(root, expected_name="@fabric/core").passed
        assert not validator.validate(root, expected_name="@Fabric/Core").passed

    def test_no_name_check_without_expectation(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", name="anything")

        result = validator.validate(root)

        assert result.check("name") is None

    def test_file_in_place_of_directory(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg")
        (root / "types").write_text("not a directory")

        result = validator.validate(root, ["types"])

        assert result.failing_artifacts == ["types"]
        assert "not a directory" in result.check("types").message

    def test_unparseable_descriptor(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg")
        (root / "package.json").write_text("{ broken")

        result = validator.validate(root)

        assert not result.check("package.json").passed
        assert "could not be parsed" in result.check("package.json").message
        # falls back to the default entry point, which exists
        assert result.check("main").passed

    def test_does_not_modify_checkout(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg", directories=["types"])
        before = sorted(p.relative_to(root) for p in root.rglob("*"))

        validator.validate(root, ["types", "missing"], expected_name="other")

        assert sorted(p.relative_to(root) for p in root.rglob("*")) == before

    def test_to_dict(self, validator, tmp_path):
        root = write_package(tmp_path / "pkg")

        d = validator.validate(root, ["types"]).to_dict()

        assert d["type"] == "validation"
        assert d["passed"] is False
        assert d["failing"] == ["types"]
