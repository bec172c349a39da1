#!/usr/bin/env python3

from pathlib import Path

import pytest

from smart_enum_codegen.pipeline import GeneratedSource, OutputConfig, OutputMode
from smart_enum_codegen.pipeline.writer import AtomicWriter, FragmentValidationError, FragmentValidator, write_sources

VALID = "namespace Ns\n{\n    public partial class First\n    {\n    }\n}\n"
OTHER_VALID = "public partial class Second\n{\n    public static int Count() => 2;\n}\n"
INVALID = "public partial class Broken\n{\n    private static readonly int\n"


def sources(*pairs):
    return [GeneratedSource(hint_name=name, source_text=text) for name, text in pairs]


def leftover_temp_files(directory: Path) -> list[Path]:
    return list(directory.glob(".*.tmp"))


class TestFragmentValidator:
    def test_valid_fragment(self):
        FragmentValidator().validate(VALID, type_name="First")

    def test_syntax_error(self):
        with pytest.raises(FragmentValidationError, match="Failed to parse"):
            FragmentValidator().validate(INVALID)

    def test_fragment_without_type(self):
        with pytest.raises(FragmentValidationError, match="no type definitions"):
            FragmentValidator().validate("using System;\n")

    def test_expected_type_missing(self):
        with pytest.raises(FragmentValidationError, match="does not declare Other"):
            FragmentValidator().validate(VALID, type_name="Other")

    def test_declared_type_names_are_in_document_order(self):
        code = "public partial struct Outer\n{\n    internal partial record Holder\n    {\n        private partial class Inner\n        {\n        }\n    }\n}\n"
        validator = FragmentValidator()
        tree = validator.parse(code)
        assert validator.declared_type_names(tree.root_node, code) == ["Outer", "Holder", "Inner"]


class TestAtomicWriter:
    def test_write_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "First.g.cs"
        AtomicWriter().write(target, VALID)
        assert target.read_text() == VALID
        assert leftover_temp_files(target.parent) == []

    def test_failed_validation_keeps_previous_content(self, tmp_path):
        target = tmp_path / "Broken.g.cs"
        target.write_text("previous")
        with pytest.raises(FragmentValidationError):
            AtomicWriter().write(target, INVALID)
        assert target.read_text() == "previous"
        assert leftover_temp_files(tmp_path) == []

    def test_custom_validator(self, tmp_path):
        seen = []
        writer = AtomicWriter(validate_csharp=seen.append)
        writer.write(tmp_path / "X.g.cs", "anything")
        assert seen == ["anything"]

    def test_write_if_not_exists(self, tmp_path):
        target = tmp_path / "First.g.cs"
        writer = AtomicWriter()
        writer.write_if_not_exists(target, VALID)
        with pytest.raises(FileExistsError):
            writer.write_if_not_exists(target, VALID)


class TestWriteSources:
    def test_writes_every_source(self, tmp_path):
        written = write_sources(sources(("Ns.First.g.cs", VALID), ("Second.g.cs", OTHER_VALID)), tmp_path)
        assert [item.path.name for item in written] == ["Ns.First.g.cs", "Second.g.cs"]
        assert all(item.changed for item in written)
        assert (tmp_path / "Second.g.cs").read_text() == OTHER_VALID

    def test_existing_file_aborts_before_any_write(self, tmp_path):
        (tmp_path / "Second.g.cs").write_text("old")
        with pytest.raises(FileExistsError, match="Second.g.cs"):
            write_sources(sources(("First.g.cs", VALID), ("Second.g.cs", OTHER_VALID)), tmp_path)
        assert sorted(path.name for path in tmp_path.iterdir()) == ["Second.g.cs"]
        assert (tmp_path / "Second.g.cs").read_text() == "old"

    def test_force_overwrites_and_reports_unchanged(self, tmp_path):
        (tmp_path / "First.g.cs").write_text(VALID)
        (tmp_path / "Second.g.cs").write_text("old")
        written = write_sources(
            sources(("First.g.cs", VALID), ("Second.g.cs", OTHER_VALID)),
            tmp_path,
            OutputConfig(mode=OutputMode.FORCE),
        )
        assert [item.changed for item in written] == [False, True]
        assert (tmp_path / "Second.g.cs").read_text() == OTHER_VALID

    def test_invalid_fragment_writes_nothing(self, tmp_path):
        with pytest.raises(FragmentValidationError):
            write_sources(sources(("First.g.cs", VALID), ("Broken.g.cs", INVALID)), tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_validation_can_be_disabled(self, tmp_path):
        write_sources(sources(("Broken.g.cs", INVALID)), tmp_path, OutputConfig(validate_before_write=False))
        assert (tmp_path / "Broken.g.cs").read_text() == INVALID

    def test_non_atomic_write(self, tmp_path):
        output_dir = tmp_path / "generated"
        written = write_sources(sources(("First.g.cs", VALID)), output_dir, OutputConfig(atomic_write=False))
        assert written[0].changed
        assert (output_dir / "First.g.cs").read_text() == VALID

    def test_no_sources(self, tmp_path):
        assert write_sources([], tmp_path) == []


if __name__ == "__main__":
    pytest.main([__file__])
