"""Tests for grouping, suspicion detection and unit report assembly."""

import os

import pytest

from bundle_inspector.config import DEFAULT_SUSPICIOUS_PATTERNS, Settings
from bundle_inspector.models import DeployableUnit, DirectoryGroup, FileEntry, UnitReport
from bundle_inspector.report import (
    build_unit_report,
    flag_suspicious,
    group_files,
    handler_warnings,
    match_pattern,
)

from conftest import make_unit


class TestGroupFiles:
    def test_partition_is_lossless(self):
        files = [
            FileEntry("src/a.js", 100),
            FileEntry("src/b/c.js", 250),
            FileEntry("node_modules/x/index.js", 4000),
            FileEntry("package.json", 42),
            FileEntry(".vc-config.json", 8),
        ]

        groups = group_files(files)

        assert sum(g.file_count for g in groups) == len(files)
        assert sum(g.total_size for g in groups) == sum(f.size for f in files)

    def test_root_files_use_sentinel_group(self):
        groups = group_files([FileEntry("package.json", 42), FileEntry("index.js", 8)])

        assert groups == [DirectoryGroup("(root)", 2, 50)]

    def test_descending_size_with_name_tiebreak(self):
        files = [
            FileEntry("zeta/a", 10),
            FileEntry("alpha/a", 10),
            FileEntry("big/a", 500),
            FileEntry("mid/a", 30),
            FileEntry("mid/b", 30),
        ]

        assert [g.name for g in group_files(files)] == ["big", "mid", "alpha", "zeta"]

    def test_empty(self):
        assert group_files([]) == []


class TestSuspicion:
    @pytest.mark.parametrize("name", ["node22", "usr", "USR", "proc", "tmp-build", ".vercel"])
    def test_default_patterns_flag_system_dirs(self, name):
        assert match_pattern(name, DEFAULT_SUSPICIOUS_PATTERNS) is not None

    @pytest.mark.parametrize("name", ["app", "lib", "src", "node_modules", "(root)"])
    def test_default_patterns_leave_project_dirs(self, name):
        assert match_pattern(name, DEFAULT_SUSPICIOUS_PATTERNS) is None

    def test_injected_patterns_replace_defaults(self):
        patterns = {"Vendor": "vendored copy"}

        assert match_pattern("vendor-libs", patterns) == "vendored copy"
        assert match_pattern("usr", patterns) is None

    def test_flag_suspicious_attaches_advisory(self):
        groups = [DirectoryGroup("usr", 3, 300), DirectoryGroup("src", 1, 10)]

        flagged = flag_suspicious(groups, {"usr": "system /usr tree"})

        assert flagged[0].suspicious
        assert flagged[0].advisory == "system /usr tree"
        assert not flagged[1].suspicious

    def test_handler_marker(self):
        markers = {"vercel/path0": "common ancestor likely dropped to /"}

        assert handler_warnings("vercel/path0/apps/web/index.js", markers) == [
            'Handler contains "vercel/path0": common ancestor likely dropped to /'
        ]
        assert handler_warnings("index.js", markers) == []


class TestBuildUnitReport:
    def _unit(self, path, name="index.func"):
        return DeployableUnit(path=path, name=name)

    def test_descriptor_and_totals(self, tmp_path):
        path = make_unit(
            tmp_path,
            "index.func",
            {"src/a.js": 100, "usr/lib/libc.so": 2048},
            descriptor={"handler": "index.js", "runtime": "nodejs22.x", "launcherType": "Nodejs"},
        )

        report = build_unit_report(self._unit(path), Settings())

        assert report.descriptor.handler == "index.js"
        assert report.descriptor.runtime == "nodejs22.x"
        assert report.descriptor_error is None
        assert report.file_count == 3
        assert [g.name for g in report.suspicious_groups] == ["usr"]
        assert not report.is_partial

    def test_missing_descriptor_is_silent(self, tmp_path):
        path = make_unit(tmp_path, "index.func", {"src/a.js": 1})

        report = build_unit_report(self._unit(path), Settings())

        assert report.descriptor is None
        assert report.descriptor_error is None

    def test_malformed_descriptor_degrades(self, tmp_path):
        path = make_unit(tmp_path, "index.func", {"src/a.js": 1})
        (path / ".vc-config.json").write_text("{not json", encoding="utf-8")

        report = build_unit_report(self._unit(path), Settings())

        assert report.descriptor is None
        assert "invalid JSON" in report.descriptor_error
        assert report.file_count == 2

    def test_handler_marker_warning(self, tmp_path):
        path = make_unit(
            tmp_path,
            "index.func",
            {},
            descriptor={"handler": "vercel/path0/apps/web/index.js", "runtime": "nodejs20.x"},
        )

        report = build_unit_report(self._unit(path), Settings())

        assert len(report.handler_warnings) == 1
        assert report.suspicious_groups == ()

    def test_partial_inventory(self, tmp_path, deny_listing):
        path = make_unit(tmp_path, "index.func", {"src/a.js": 10, "locked/b.js": 20})
        deny_listing(path / "locked")

        report = build_unit_report(self._unit(path), Settings())

        assert report.is_partial
        assert report.file_count == 1
        assert report.total_size == 10


def test_unit_report_rejects_lossy_groups():
    with pytest.raises(ValueError):
        UnitReport(
            unit=DeployableUnit(path=None, name="x.func"),
            descriptor=None,
            descriptor_error=None,
            file_count=2,
            total_size=10,
            groups=(DirectoryGroup("src", 1, 10),),
        )


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_link_does_not_hide_system_directory(tmp_path):
    path = make_unit(tmp_path, "index.func", {"usr/lib/libc.so": 2048, "src/a.js": 10})
    os.symlink(path / "usr", path / "a_usr_link")

    report = build_unit_report(DeployableUnit(path=path, name="index.func"), Settings())

    assert [(g.name, g.file_count) for g in report.suspicious_groups] == [("usr", 1)]
    assert "a_usr_link" not in [g.name for g in report.groups]
