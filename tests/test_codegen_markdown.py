"""Tests for Markdown generation."""

from __future__ import annotations

from pathlib import Path

import pytest

from xmldoc_md.codegen_markdown import MarkdownRenderer, format_default, generate_docs
from xmldoc_md.config import RenderConfig
from xmldoc_md.docindex import build_index, load_documentation
from xmldoc_md.errors import MetadataLoadError
from xmldoc_md.metadata import (
    ConstructorInfo,
    EventInfo,
    FieldInfo,
    MetadataProvider,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    StaticMetadataProvider,
    TypeInfo,
    TypeKind,
    TypeRef,
    YamlMetadataProvider,
)
from xmldoc_md.xmlsource import parse_xml

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "01_shapes"


def _index(members: str):
    return build_index(parse_xml(f"<doc><members>{members}</members></doc>"))


def _render(members: str, types: list[TypeInfo], config: RenderConfig | None = None) -> str:
    return MarkdownRenderer(_index(members), config).render(StaticMetadataProvider(types))


def test_single_documented_class() -> None:
    rendered = _render(
        '<member name="T:N.C"><summary>Does X.</summary></member>'
        '<member name="M:N.C.Foo"><summary>Runs foo.</summary></member>',
        [TypeInfo("N.C", TypeKind.CLASS, methods=[MethodInfo("Foo")])],
    )

    assert rendered.count("## ") == 1
    assert '<a id="N.C"></a>\n## class N.C\n' in rendered
    assert "Does X." in rendered
    assert "**Methods**" in rendered
    assert '<a id="N.C.Foo"></a>\n\n* *void* **Foo** *()*  \n  Runs foo.  \n' in rendered
    assert rendered.index("**Methods**") < rendered.index("**Foo**")
    assert "Parameters" not in rendered
    assert "Extends" not in rendered
    assert rendered.endswith("\n---\n\n")


def test_undocumented_type_is_skipped() -> None:
    rendered = _render(
        '<member name="M:N.Hidden.Run"><summary>Documented.</summary></member>',
        [TypeInfo("N.Hidden", TypeKind.CLASS, methods=[MethodInfo("Run")])],
    )

    assert rendered == ""


def test_types_ordered_by_importance_then_provider_order() -> None:
    rendered = _render(
        '<member name="T:N.Low"><importance>1</importance></member>'
        '<member name="T:N.First"><importance>5</importance></member>'
        '<member name="T:N.Second"><importance>5</importance></member>'
        '<member name="T:N.High"><importance>9</importance></member>'
        '<member name="T:N.Plain"/>',
        [
            TypeInfo("N.Plain", TypeKind.CLASS),
            TypeInfo("N.Low", TypeKind.CLASS),
            TypeInfo("N.First", TypeKind.CLASS),
            TypeInfo("N.Second", TypeKind.CLASS),
            TypeInfo("N.High", TypeKind.CLASS),
        ],
    )

    headings = [line for line in rendered.splitlines() if line.startswith("## ")]
    assert headings == [
        "## class N.High",
        "## class N.First",
        "## class N.Second",
        "## class N.Low",
        "## class N.Plain",
    ]
    assert rendered.count("\n---\n") == 5


def test_member_sections_in_fixed_order() -> None:
    type_info = TypeInfo(
        "N.C",
        TypeKind.CLASS,
        base_type=TypeRef("N.Base"),
        constructors=[ConstructorInfo([ParameterInfo("other", TypeRef("N.Other"))])],
        methods=[
            MethodInfo("get_Size", returns=TypeRef("System.Int32")),
            MethodInfo("Run", returns=TypeRef("System.Boolean")),
            MethodInfo("Create", returns=TypeRef("N.C"), static=True),
            MethodInfo(
                "op_Equality",
                returns=TypeRef("System.Boolean"),
                static=True,
                special_name=True,
            ),
        ],
        properties=[
            PropertyInfo("Size", TypeRef("System.Int32")),
            PropertyInfo("Default", TypeRef("N.C"), static=True),
        ],
        fields=[
            FieldInfo("Tag", TypeRef("System.Object")),
            FieldInfo("Zero", TypeRef("System.Int32"), static=True),
        ],
        events=[
            EventInfo("Changed", TypeRef("System.EventHandler")),
            EventInfo("Created", TypeRef("System.EventHandler"), static=True),
        ],
    )
    rendered = _render('<member name="T:N.C"/>', [type_info])

    titles = [
        "**Constructors**",
        "**Methods**",
        "**Events**",
        "**Properties and Fields**",
        "**Static Methods**",
        "**Static Properties and Fields**",
        "**Static Events**",
    ]
    positions = [rendered.index(title) for title in titles]
    assert positions == sorted(positions)
    assert "Extends `N.Base`" in rendered
    assert '<a id="N.C.#ctor(N.Other)"></a>\n\n* **C** *(N.Other other)*\n' in rendered
    assert "get_Size" not in rendered
    assert "op_Equality" not in rendered
    assert rendered.index("**Size**") < rendered.index("**Tag**")
    assert "* *int* **Size**\n" in rendered
    assert "* *System.EventHandler* **Changed**\n" in rendered
    assert "* *N.C* **Create** *()*\n" in rendered


def test_methods_section_omitted_when_only_accessors() -> None:
    type_info = TypeInfo(
        "N.C",
        TypeKind.CLASS,
        methods=[MethodInfo("get_Size", returns=TypeRef("System.Int32"))],
        properties=[PropertyInfo("Size", TypeRef("System.Int32"))],
    )
    rendered = _render('<member name="T:N.C"/>', [type_info])

    assert "**Methods**" not in rendered
    assert "**Properties and Fields**" in rendered


def test_enum_rendering() -> None:
    rendered = _render(
        '<member name="T:N.Color"><summary>Colors.</summary></member>'
        '<member name="T:N.Empty"/>',
        [
            TypeInfo(
                "N.Color",
                TypeKind.ENUM,
                base_type=TypeRef("N.Whatever"),
                enum_values=["Red", "Green"],
            ),
            TypeInfo("N.Empty", TypeKind.ENUM),
        ],
    )

    assert "## enum N.Color" in rendered
    assert "Colors.\n\n**Enum Values**\n\n* **Red**\n* **Green**\n" in rendered
    assert rendered.count("**Enum Values**") == 1
    assert "Extends" not in rendered


def test_struct_and_interface_keywords() -> None:
    rendered = _render(
        '<member name="T:N.S"/><member name="T:N.I"/><member name="T:N.D"/>',
        [
            TypeInfo("N.S", TypeKind.STRUCT, base_type=TypeRef("N.Base")),
            TypeInfo("N.I", TypeKind.INTERFACE),
            TypeInfo("N.D", TypeKind.DELEGATE, base_type=TypeRef("System.MulticastDelegate")),
        ],
    )

    assert "## struct N.S" in rendered
    assert "## interface N.I" in rendered
    assert "N.D" not in rendered
    assert "Extends" not in rendered

    shown = _render(
        '<member name="T:N.D"/>',
        [TypeInfo("N.D", TypeKind.DELEGATE, base_type=TypeRef("System.MulticastDelegate"))],
        RenderConfig(skip_delegates=False),
    )
    assert "## class N.D" in shown
    assert "Extends" not in shown


def test_member_details() -> None:
    members = (
        '<member name="T:N.C"/>'
        '<member name="M:N.C.Scale(System.Double,System.Boolean)">'
        "<summary>Scales.</summary><remarks>Copies.</remarks>"
        '<param name="round">Round the result.</param>'
        "<returns>The copy.</returns></member>"
    )
    types = [
        TypeInfo(
            "N.C",
            TypeKind.CLASS,
            methods=[
                MethodInfo(
                    "Scale",
                    returns=TypeRef("N.C"),
                    parameters=[
                        ParameterInfo("factor", TypeRef("System.Double")),
                        ParameterInfo(
                            "round", TypeRef("System.Boolean"), optional=True, default=True
                        ),
                    ],
                )
            ],
        )
    ]

    rendered = _render(members, types)
    assert (
        "* *N.C* **Scale** *(double factor, [bool round])*  \n"
        "  Scales.  \n"
        "  Copies.\n"
        "  **Returns:** The copy.\n"
        "  **Parameters:**\n"
        "  * *bool* **round** *(optional, default: true)*: Round the result.\n"
    ) in rendered

    plain = _render(members, types, RenderConfig(member_details=False))
    assert "  Scales.  \n  Copies.\n\n" in plain
    assert "Returns" not in plain
    assert "Parameters" not in plain


def test_undocumented_member_has_no_body() -> None:
    rendered = _render(
        '<member name="T:N.C"/>',
        [
            TypeInfo(
                "N.C",
                TypeKind.CLASS,
                methods=[MethodInfo("Run", returns=TypeRef("System.String"))],
            )
        ],
    )

    assert '<a id="N.C.Run"></a>\n\n* *string* **Run** *()*\n\n' in rendered


def test_format_default() -> None:
    assert format_default(None) == "null"
    assert format_default(False) == "false"
    assert format_default("a") == '"a"'
    assert format_default(2.5) == "2.5"


def test_provider_failure_is_fatal() -> None:
    class BrokenProvider(MetadataProvider):
        def exported_types(self) -> list[TypeInfo]:
            raise MetadataLoadError("cannot enumerate types")

    renderer = MarkdownRenderer(_index('<member name="T:N.C"/>'))
    with pytest.raises(MetadataLoadError, match="cannot enumerate"):
        renderer.render(BrokenProvider())


def test_generate_docs_fixture(tmp_path: Path) -> None:
    output = tmp_path / "out" / "Shapes.md"
    generate_docs(
        load_documentation(FIXTURES / "Shapes.xml"),
        YamlMetadataProvider(FIXTURES / "Shapes.yml"),
        output,
    )

    rendered = output.read_text(encoding="utf-8")
    assert rendered.index("## enum Shapes.Color") < rendered.index("## class Shapes.Circle")
    assert "Shapes.Hidden" not in rendered
    assert "Shapes.Internal" not in rendered
    assert "Extends `Shapes.Shape`" in rendered
    assert "A circle defined by its [Radius](#Shapes.Circle.Radius) ." in rendered
    assert "**Examples**" in rendered
    assert "```csharp\nvar c = new Circle(2.0);\n" in rendered
    assert "* **Circle** *(double radius)*  \n  Creates a circle.  \n" in rendered
    assert "  * *double* **radius**: The radius.\n" in rendered
    assert "* *Shapes.Circle* **Scale** *(double factor, [bool round])*  \n" in rendered
    assert "  **Returns:** The new [Circle](#Shapes.Circle) .\n" in rendered
    assert "* *string* **ToString** *()*\n" in rendered
    assert "get_Radius" not in rendered
    assert "* *double* **Radius**  \n  Radius of the circle.  \n" in rendered
    assert "* *object* **Tag**\n" in rendered
    assert "**Static Methods**" in rendered
    assert rendered.count("\n---\n") == 2
