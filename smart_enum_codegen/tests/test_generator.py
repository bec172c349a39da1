#!/usr/bin/env python3

import pytest
from compilation_builders import constructor, document, enum_type, single_type_document, syntax_tree

from smart_enum_codegen.compilation import load_compilation
from smart_enum_codegen.pipeline import (
    CancellationToken,
    GeneratorConfig,
    SmartEnumAstBackend,
    SmartEnumGenerator,
    StepRunReason,
    WellKnownTypeNames,
)
from smart_enum_codegen.pipeline.generator import CONTEXT_STEP, EMIT_STEP, FILTER_STEP, MARKER_STEP

NEW = StepRunReason.NEW
CACHED = StepRunReason.CACHED


def make_generator(**kwargs) -> SmartEnumGenerator:
    config = GeneratorConfig(add_generation_comment=False, **kwargs)
    return SmartEnumGenerator(config)


def run(doc, generator=None, token=None):
    generator = generator or make_generator()
    return generator.run(load_compilation(doc), token)


class TestScenarios:
    def test_top_level_four_members(self):
        result = run(single_type_document(enum_type(members=("One", "Two", "Three", "Four"))))
        assert result.hint_names == ["TestEnum.SmartEnum.g.cs"]
        text = result.sources[0].source_text
        for value, member in enumerate(("One", "Two", "Three", "Four")):
            assert f"{member} = new TestEnum(nameof({member}), {value});" in text
        assert "namespace" not in text
        assert "public partial class TestEnum : SmartEnum<TestEnum>" in text

    def test_flag_enumeration(self):
        doc = single_type_document(
            enum_type(name="Flags", members=("A", "B", "C", "D", "E"), base="SmartFlagEnum<Flags>"),
            namespace="Ns",
        )
        text = run(doc).sources[0].source_text
        for member, value in zip(("A", "B", "C", "D", "E"), (0, 1, 2, 4, 8)):
            assert f"{member} = new Flags(nameof({member}), {value});" in text
        assert "public partial class Flags\n" in text

    def test_doubly_nested(self):
        inner = {"name": "B", "modifiers": ["public", "partial"], "types": [enum_type()]}
        outer = {"name": "A", "modifiers": ["public", "partial"], "types": [inner]}
        result = run(document(syntax_tree(outer, namespace="Some.Name.Space")))
        assert result.hint_names == ["Some.Name.Space.A_B_TestEnum.SmartEnum.g.cs"]
        text = result.sources[0].source_text
        assert "namespace Some.Name.Space\n{\n    public partial class A\n    {\n        public partial class B\n" in text

    def test_existing_constructor_is_not_duplicated(self):
        ctor = constructor({"name": "name", "type": "string"}, {"name": "value", "type": "int"})
        text = run(single_type_document(enum_type(extra_members=(ctor,)))).sources[0].source_text
        assert "private TestEnum(" not in text

    def test_required_extra_parameter_does_not_suppress_constructor(self):
        ctor = constructor({"name": "name", "type": "string"}, {"name": "value", "type": "int"}, {"name": "extra", "type": "int"})
        text = run(single_type_document(enum_type(extra_members=(ctor,)))).sources[0].source_text
        assert "private TestEnum(string name, int value) : base(name, value)" in text

    def test_unsupported_value_type_skips_only_that_declaration(self):
        doc = document(
            syntax_tree(
                enum_type(name="ById", base="SmartEnum<ById, System.Guid>"),
                enum_type(name="Fine"),
            )
        )
        result = run(doc)
        assert result.hint_names == ["Fine.SmartEnum.g.cs"]

    def test_declaration_without_members_is_skipped(self):
        doc = document(syntax_tree(enum_type(name="Empty", members=()), enum_type(name="Fine")))
        assert run(doc).hint_names == ["Fine.SmartEnum.g.cs"]

    def test_unmarked_and_non_partial_declarations_are_ignored(self):
        doc = document(
            syntax_tree(
                enum_type(name="Unmarked", attributes=()),
                enum_type(name="Sealed", modifiers=("public", "sealed")),
                enum_type(name="Fine"),
            )
        )
        assert run(doc).hint_names == ["Fine.SmartEnum.g.cs"]

    def test_sources_follow_tree_order(self):
        doc = document(
            syntax_tree(enum_type(name="First"), enum_type(name="Second"), path="A.cs"),
            syntax_tree(enum_type(name="Third"), path="B.cs", namespace="Ns"),
        )
        assert run(doc).hint_names == ["First.SmartEnum.g.cs", "Second.SmartEnum.g.cs", "Ns.Third.SmartEnum.g.cs"]


class TestPassOutcome:
    def test_none_compilation_raises(self):
        with pytest.raises(ValueError):
            make_generator().run(None)

    def test_missing_well_known_types_produce_nothing(self):
        # The marker binds, but the enumeration bases are not referenced
        partial_library = {
            "namespace": "Ardalis.SmartEnum",
            "types": [
                {"name": "SmartEnumAttribute", "base": "System.Attribute"},
                {"name": "EnumMemberAttribute", "base": "System.Attribute"},
            ],
        }
        doc = document(syntax_tree(enum_type(base="System.Object")), references=(partial_library,))
        result = run(doc)
        assert result.sources == []
        assert not result.cancelled
        assert result.step_reasons(MARKER_STEP) == [NEW]

    def test_no_references_produce_nothing(self):
        doc = document(syntax_tree(enum_type(base="System.Object", attributes=())), references=())
        assert run(doc).sources == []

    def test_rerun_is_byte_identical(self):
        doc = document(syntax_tree(enum_type(name="First"), enum_type(name="Second", base="SmartFlagEnum<Second>"), namespace="Ns"))
        first = run(doc)
        second = run(doc)
        assert first.sources == second.sources

    def test_duplicate_hint_names_are_emitted_once(self):
        class FlatBackend(SmartEnumAstBackend):
            def hint_name(self, context):
                return context.name + self.config.hint_name_suffix

        config = GeneratorConfig(add_generation_comment=False)
        generator = SmartEnumGenerator(config, FlatBackend(config))
        doc = document(
            syntax_tree(enum_type(), path="A.cs", namespace="A"),
            syntax_tree(enum_type(), path="B.cs", namespace="B"),
        )
        result = generator.run(load_compilation(doc))
        assert result.hint_names == ["TestEnum.SmartEnum.g.cs"]
        assert "namespace A\n" in result.sources[0].source_text


class TestIncremental:
    def two_type_document(self, second_members=("One", "Two")):
        return document(syntax_tree(enum_type(name="First"), enum_type(name="Second", members=second_members)))

    def test_unchanged_input_is_fully_cached(self):
        generator = make_generator()
        first = run(self.two_type_document(), generator)
        assert first.step_reasons(FILTER_STEP) == [NEW, NEW]
        assert first.step_reasons(MARKER_STEP) == [NEW, NEW]
        assert first.step_reasons(EMIT_STEP) == [NEW, NEW]

        second = run(self.two_type_document(), generator)
        assert second.step_reasons(FILTER_STEP) == [CACHED, CACHED]
        assert second.step_reasons(MARKER_STEP) == [CACHED, CACHED]
        assert second.step_reasons(CONTEXT_STEP) == [CACHED, CACHED]
        assert second.step_reasons(EMIT_STEP) == [CACHED, CACHED]
        assert second.sources == first.sources

    def test_member_edit_recomputes_only_that_declaration(self):
        generator = make_generator()
        run(self.two_type_document(), generator)

        result = run(self.two_type_document(second_members=("One", "Two", "Three")), generator)
        assert result.step_reasons(FILTER_STEP) == [CACHED, CACHED]
        assert result.step_reasons(CONTEXT_STEP) == [CACHED, NEW]
        assert result.step_reasons(EMIT_STEP) == [CACHED, NEW]
        assert "Three = new Second(nameof(Three), 2);" in result.get_source("Second.SmartEnum.g.cs").source_text

    def test_declaration_edit_reruns_filter(self):
        generator = make_generator()
        run(self.two_type_document(), generator)

        doc = document(syntax_tree(enum_type(name="First", modifiers=("internal", "partial")), enum_type(name="Second", members=("One", "Two"))))
        result = run(doc, generator)
        assert result.step_reasons(FILTER_STEP) == [NEW, CACHED]
        assert result.step_reasons(MARKER_STEP) == [NEW, CACHED]
        assert result.step_reasons(EMIT_STEP) == [NEW, CACHED]

    def test_using_edit_reruns_marker(self):
        generator = make_generator()
        run(self.two_type_document(), generator)

        tree = syntax_tree(enum_type(name="First"), enum_type(name="Second", members=("One", "Two")), usings=("Ardalis.SmartEnum", "System"))
        result = run(document(tree), generator)
        assert result.step_reasons(FILTER_STEP) == [CACHED, CACHED]
        assert result.step_reasons(MARKER_STEP) == [NEW, NEW]

    def test_reference_added_later_regenerates(self):
        generator = make_generator()
        tree = syntax_tree(enum_type(attributes=("SmartEnum",)))
        first = run(document(tree, references=()), generator)
        assert first.sources == []

        result = run(document(tree), generator)
        assert result.step_reasons(MARKER_STEP) == [NEW]
        assert result.sources == run(document(tree)).sources
        assert result.hint_names == ["TestEnum.SmartEnum.g.cs"]

    def test_attribute_class_declared_in_another_tree_regenerates(self):
        generator = make_generator(type_names=WellKnownTypeNames(smart_enum_attribute="Local.SmartEnumAttribute"))
        enum_tree = syntax_tree(enum_type(attributes=("Local.SmartEnum",)))
        assert run(document(enum_tree), generator).sources == []

        marker = {"name": "SmartEnumAttribute", "modifiers": ["public", "sealed"], "base": "System.Attribute"}
        doc = document(enum_tree, syntax_tree(marker, path="Marker.cs", namespace="Local"))
        result = run(doc, generator)
        assert result.hint_names == ["TestEnum.SmartEnum.g.cs"]
        assert result.step_reasons(MARKER_STEP) == [NEW]

    def test_unchanged_compilation_keeps_marker_verdicts(self):
        generator = make_generator()
        run(self.two_type_document(), generator)
        result = run(self.two_type_document(second_members=("One",)), generator)
        assert result.step_reasons(MARKER_STEP) == [CACHED, CACHED]


class TestCancellation:
    def test_cancelled_before_start(self):
        token = CancellationToken()
        token.cancel()
        result = run(single_type_document(enum_type()), token=token)
        assert result.cancelled
        assert result.sources == []

    def test_cancelled_between_declarations(self):
        token = CancellationToken()

        class CancellingBackend(SmartEnumAstBackend):
            def emit(self, context):
                source = super().emit(context)
                token.cancel()
                return source

        config = GeneratorConfig(add_generation_comment=False)
        generator = SmartEnumGenerator(config, CancellingBackend(config))
        doc = document(syntax_tree(enum_type(name="First"), enum_type(name="Second")))

        result = generator.run(load_compilation(doc), token)
        assert result.cancelled
        assert result.hint_names == ["First.SmartEnum.g.cs"]

        generator.backend = SmartEnumAstBackend(config)
        resumed = generator.run(load_compilation(doc))
        assert not resumed.cancelled
        assert resumed.hint_names == ["First.SmartEnum.g.cs", "Second.SmartEnum.g.cs"]
        assert resumed.step_reasons(EMIT_STEP) == [CACHED, NEW]


if __name__ == "__main__":
    pytest.main([__file__])
