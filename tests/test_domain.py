"""Tests for the domain layer."""

from repoprov.domain import (
    ArtifactCheck,
    OperationDetail,
    OperationStatus,
    ProbeResult,
    ProbeStatus,
    ProvenanceRecord,
    ProvisionedClone,
    RepositoryDeclaration,
    RunReport,
    ValidationResult,
    clone_key,
)


class TestRepositoryDeclaration:

    def test_key_uses_clone_suffix(self):
        assert clone_key("demo") == "demo-repository"
        declaration = RepositoryDeclaration("demo", "git@x", "https://x")
        assert declaration.key == "demo-repository"

    def test_from_entry_rejects_empty_identity(self):
        assert RepositoryDeclaration.from_entry("", {"link": "a", "httpsLink": "b"}) is None

    def test_from_entry_ignores_bad_required_directories(self):
        declaration = RepositoryDeclaration.from_entry(
            "demo", {"link": "a", "httpsLink": "b", "requiredDirectories": "types"}
        )
        assert declaration.required_directories == ()

    def test_to_dict_uses_wire_names(self):
        d = RepositoryDeclaration("demo", "git@x", "https://x").to_dict()
        assert d["httpsLink"] == "https://x"
        assert d["key"] == "demo-repository"


class TestProvisionedClone:

    def test_inspect_valid_clone(self, tmp_path):
        path = tmp_path / "demo-repository"
        (path / ".git").mkdir(parents=True)
        (path / "package.json").write_text("{}")

        clone = ProvisionedClone.inspect("demo", path)

        assert clone.exists and clone.has_vcs_marker and clone.has_descriptor
        assert clone.valid
        assert clone.key == "demo-repository"

    def test_inspect_without_marker_is_invalid(self, tmp_path):
        path = tmp_path / "demo-repository"
        path.mkdir()
        (path / "package.json").write_text("{}")

        clone = ProvisionedClone.inspect("demo", path)

        assert clone.exists
        assert not clone.valid

    def test_inspect_missing(self, tmp_path):
        clone = ProvisionedClone.inspect("demo", tmp_path / "nope")
        assert not clone.exists
        assert not clone.has_vcs_marker


class TestProvenanceRecord:

    def test_wire_shape(self):
        record = ProvenanceRecord("git@x", "https://x", True, "/w/demo-repository", 1700000000000)
        assert record.to_dict() == {
            "link": "git@x",
            "httpsLink": "https://x",
            "cloned": True,
            "path": "/w/demo-repository",
            "timestamp": 1700000000000,
        }

    def test_from_dict(self):
        record = ProvenanceRecord.from_dict({"link": "a", "httpsLink": "b", "cloned": True,
                                             "path": "/p", "timestamp": 5})
        assert record.https_link == "b"
        assert record.timestamp == 5


class TestValidationResult:

    def test_aggregates_failures(self):
        result = ValidationResult("/p", (
            ArtifactCheck("package.json", True),
            ArtifactCheck("main", True),
            ArtifactCheck("types", False, "types directory not found"),
        ))
        assert not result.passed
        assert result.failing_artifacts == ["types"]
        assert result.check("main").passed

    def test_no_checks_passes(self):
        assert ValidationResult("/p").passed


class TestProbeResult:

    def test_failing_check_fails(self):
        result = ProbeResult("library", "fabric")
        result.add("Fabric", True)
        result.add("Fabric.sha256", False, "missing")
        assert result.status == ProbeStatus.FAILED
        assert result.failing_checks == ["Fabric.sha256"]

    def test_skip(self):
        result = ProbeResult("library", "fabric").skip("not loadable")
        assert result.skipped
        assert result.to_dict()["status"] == "skipped"


class TestRunReport:

    def test_counts(self):
        report = RunReport(malformed=1)
        report.add_detail(OperationDetail("a", OperationStatus.PASSED, "provisioned"))
        report.add_detail(OperationDetail("b", OperationStatus.SKIPPED, "clone"))
        report.add_detail(OperationDetail("c", OperationStatus.FAILED, "clone", error="boom"))

        assert (report.total, report.passed, report.skipped, report.failed) == (3, 1, 1, 1)
        assert not report.success
        assert report.errors == ["c: boom"]
        assert report.to_dict()["malformed"] == 1

    def test_skips_do_not_fail(self):
        report = RunReport()
        report.add_detail(OperationDetail("a", OperationStatus.SKIPPED, "clone"))
        assert report.success

    def test_failed_library_fails_run(self):
        report = RunReport(library={"status": "failed"})
        assert not report.success
