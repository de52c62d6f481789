"""StagingArea 单元测试"""

from __future__ import annotations

import pytest

from prebuilts.core.exceptions import FilesystemError, MissingOutputError
from prebuilts.services.staging import StagingArea


class TestStagingArea:
    @pytest.fixture()
    def staging(self, tmp_path):
        area = StagingArea(tmp_path / "stage")
        area.reset()
        return area

    def test_reset_destroys_previous_run(self, tmp_path) -> None:
        stage = tmp_path / "stage"
        (stage / "old").mkdir(parents=True)
        (stage / "old" / "leftover.zip").write_text("x")
        area = StagingArea(stage)
        area.reset()
        assert not (stage / "old").exists()
        assert area.src_dir.is_dir()

    def test_layout(self, staging) -> None:
        assert staging.repo_dir("swift-syntax") == staging.root / "src" / "swift-syntax"
        assert staging.version_dir("swift-syntax", "600.0.1") == staging.root / "swift-syntax" / "600.0.1"
        assert [p.name for p in staging.collection_dirs()] == ["lib", "Modules", "include"]

    def test_ensure_version_dir_idempotent(self, staging) -> None:
        first = staging.ensure_version_dir("repo", "1.0")
        second = staging.ensure_version_dir("repo", "1.0")
        assert first == second and first.is_dir()

    def test_collection_dirs_lifecycle(self, staging) -> None:
        staging.create_collection_dirs()
        assert all(p.is_dir() for p in staging.collection_dirs())
        (staging.lib_dir / "libA.a").write_text("a")
        staging.remove_collection_dirs()
        assert not any(p.exists() for p in staging.collection_dirs())

    def test_create_twice_fails(self, staging) -> None:
        staging.create_collection_dirs()
        with pytest.raises(FilesystemError, match="mkdir"):
            staging.create_collection_dirs()

    def test_remove_missing_collection_dirs_fails(self, staging) -> None:
        with pytest.raises(FilesystemError, match="remove"):
            staging.remove_collection_dirs()

    def test_purge_scratch(self, staging) -> None:
        repo = staging.repo_dir("r")
        (repo / ".build" / "release").mkdir(parents=True)
        staging.purge_scratch(repo)
        assert not (repo / ".build").exists()
        staging.purge_scratch(repo)

    def test_copy_file_missing_source(self, staging, tmp_path) -> None:
        with pytest.raises(MissingOutputError) as exc:
            staging.copy_file(tmp_path / "nope.a", staging.root / "nope.a")
        assert exc.value.path.endswith("nope.a")

    def test_copy_file_existing_destination(self, staging, tmp_path) -> None:
        src = tmp_path / "a.txt"
        src.write_text("a")
        dest = staging.root / "a.txt"
        dest.write_text("old")
        with pytest.raises(FilesystemError, match="目标已存在"):
            staging.copy_file(src, dest)

    def test_copy_dir_contents(self, staging, tmp_path) -> None:
        src = tmp_path / "Modules"
        (src / "Nested.swiftmodule").mkdir(parents=True)
        (src / "Nested.swiftmodule" / "arm64.swiftinterface").write_text("i")
        (src / "A.swiftmodule.txt").write_text("m")
        staging.create_collection_dirs()
        copied = staging.copy_dir_contents(src, staging.modules_dir)
        assert [p.name for p in copied] == ["A.swiftmodule.txt", "Nested.swiftmodule"]
        assert (staging.modules_dir / "Nested.swiftmodule" / "arm64.swiftinterface").read_text() == "i"

    def test_copy_dir_contents_missing(self, staging, tmp_path) -> None:
        with pytest.raises(MissingOutputError):
            staging.copy_dir_contents(tmp_path / "missing", staging.root)

    def test_remove_src(self, staging) -> None:
        staging.remove_src()
        assert not staging.src_dir.exists()
        with pytest.raises(FilesystemError):
            staging.remove_src()
