"""Tests for FileSystemGateway and SourceFixerGateway."""

from unittest.mock import MagicMock

from kt_array_literal.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from kt_array_literal.infrastructure.gateways.source_fixer_gateway import SourceFixerGateway


class TestFileSystemGateway:
    def test_glob_finds_kotlin_sources_recursively(self, tmp_path) -> None:
        (tmp_path / "src" / "main").mkdir(parents=True)
        (tmp_path / "src" / "main" / "A.kt").write_text("class A\n")
        (tmp_path / "build.gradle.kts").write_text("plugins {}\n")
        (tmp_path / "README.md").write_text("# readme\n")

        found = sorted(FileSystemGateway().glob_kotlin_files(str(tmp_path)))

        assert found == sorted(
            [str((tmp_path / "build.gradle.kts").resolve()), str((tmp_path / "src" / "main" / "A.kt").resolve())]
        )

    def test_glob_of_single_file(self, tmp_path) -> None:
        source = tmp_path / "A.kt"
        source.write_text("class A\n")
        gateway = FileSystemGateway()

        assert gateway.glob_kotlin_files(str(source)) == [str(source.resolve())]
        assert gateway.glob_kotlin_files(str(tmp_path / "Missing.kt")) == []
        assert gateway.glob_kotlin_files(str(tmp_path / "notes.txt")) == []

    def test_read_and_write_round_trip_utf8(self, tmp_path) -> None:
        gateway = FileSystemGateway()
        path = str(tmp_path / "Ü.kt")

        gateway.write_text(path, "val s = \"ä\"\n")

        assert gateway.read_text(path) == "val s = \"ä\"\n"


class TestSourceFixerGateway:
    def test_writes_changed_text(self) -> None:
        filesystem = MagicMock()
        filesystem.read_text.return_value = "@Ann(arrayOf(1))"

        changed = SourceFixerGateway(filesystem).apply_fixes("A.kt", "@Ann([1])")

        assert changed is True
        filesystem.write_text.assert_called_once_with("A.kt", "@Ann([1])")

    def test_unchanged_text_is_not_written(self) -> None:
        filesystem = MagicMock()
        filesystem.read_text.return_value = "@Ann([1])"

        assert SourceFixerGateway(filesystem).apply_fixes("A.kt", "@Ann([1])") is False
        filesystem.write_text.assert_not_called()
