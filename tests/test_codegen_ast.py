"""Unit tests for rendering compiled definitions to source."""

from __future__ import annotations

import ast
import io
from typing import Any

from jsonschema_to_pydantic_generator.codegen_ast import render_doc_definitions, render_module
from jsonschema_to_pydantic_generator.config import SchemaStructConfig, Visibility
from jsonschema_to_pydantic_generator.generator import compile_definitions, compile_schema

from .fixture_helpers import load_fixture


def _render(schema: dict[str, Any], **options: Any) -> ast.Module:
    compiled = compile_definitions(SchemaStructConfig(schema=schema, **options))
    return ast.parse(render_module(compiled))


def _class(module: ast.Module, name: str) -> ast.ClassDef:
    for node in module.body:
        if isinstance(node, ast.ClassDef) and node.name == name:
            return node
    raise AssertionError(f"class {name} not rendered")


def _exports(module: ast.Module) -> list[str]:
    for node in module.body:
        if isinstance(node, ast.Assign) and ast.unparse(node.targets[0]) == "__all__":
            value = ast.literal_eval(node.value)
            assert isinstance(value, list)
            return value
    raise AssertionError("__all__ not rendered")


def test_module_layout() -> None:
    """Modules import what they use and rebuild every model at the end."""
    module = _render(load_fixture("tree.json"))
    imports = [ast.unparse(node) for node in module.body if isinstance(node, ast.ImportFrom)]
    assert imports == [
        "from __future__ import annotations",
        "from typing import Optional",
        "from pydantic import BaseModel, ConfigDict, Field",
        "from jsonschema_to_pydantic_generator import runtime",
    ]
    aliases = [node.name.id for node in module.body if isinstance(node, ast.TypeAlias)]
    assert aliases == ["TreeNodeDefSpan"]
    rebuilds = [ast.unparse(node) for node in module.body[-3:]]
    assert rebuilds == [
        "TreeNodeDefMetadata.model_rebuild()",
        "TreeNodeDefPerson.model_rebuild()",
        "TreeNode.model_rebuild()",
    ]


def test_model_fields_render_pydantic_field_calls() -> None:
    """Aliases, descriptions and defaults are passed through ``Field``."""
    module = _render(load_fixture("product.json"))
    product = _class(module, "Product")
    fields = {
        node.target.id: ast.unparse(node)
        for node in product.body
        if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name)
    }
    assert fields["product_id"] == (
        "product_id: int = Field(..., alias='productId', "
        "description='The unique identifier for a product.')"
    )
    assert fields["dimensions"] == "dimensions: Optional[ProductDimensions] = Field(None)"
    assert fields["availability"] == (
        "availability: Optional[ProductAvailability] = "
        "Field(default_factory=Product_availability_default)"
    )
    configs = [ast.unparse(node) for node in product.body if isinstance(node, ast.Assign)]
    assert configs == [
        "model_config = ConfigDict(strict=True, validate_by_name=True, protected_namespaces=())"
    ]
    methods = [node.name for node in product.body if isinstance(node, ast.FunctionDef)]
    assert methods == ["from_json", "to_json"]


def test_enum_renders_members_and_entry_points() -> None:
    """Enums carry their wire values and the same entry points as models."""
    availability = _class(_render(load_fixture("product.json")), "ProductAvailability")
    assert [ast.unparse(base) for base in availability.bases] == ["Enum"]
    members = [ast.unparse(node) for node in availability.body if isinstance(node, ast.Assign)]
    assert members == ["InStock = 'in-stock'", "SoldOut = 'sold out'", "Preorder = 'preorder'"]
    methods = [node.name for node in availability.body if isinstance(node, ast.FunctionDef)]
    assert methods == ["from_json", "to_json"]


def test_top_level_docstring_embeds_full_definition() -> None:
    """The root model documents every generated type in simplified form."""
    product = _class(_render(load_fixture("product.json")), "Product")
    docstring = ast.get_docstring(product)
    assert docstring is not None
    assert docstring.startswith("A product from the catalog.\n\n# Full definition\n\n```\n")
    assert "class ProductDefLocation(BaseModel):" in docstring
    assert "    latitude: float" in docstring
    assert "class ProductAvailability(Enum):" in docstring
    assert "from_json" not in docstring
    assert "_default" not in docstring

    plain = _class(_render(load_fixture("product.json"), definition_doc=False), "Product")
    assert ast.get_docstring(plain) == "A product from the catalog."


def test_visibility_renders_exports() -> None:
    """Public modules list all types in ``__all__``; private modules export nothing."""
    schema = load_fixture("settings.json")
    public = _exports(_render(schema, visibility=Visibility.PUBLIC))
    assert "Settings" in public and "SettingsNetworkProxy" in public and "SettingsMode" in public
    assert not [name for name in public if name.endswith("_default")]
    assert _exports(_render(schema)) == []


def test_validation_toggle_routes_top_level_from_json() -> None:
    """Only the top-level model validates against the captured schema."""
    source = render_module(
        compile_definitions(SchemaStructConfig(schema=load_fixture("product.json"), validate=True))
    )
    assert "_VALIDATION_SCHEMA = " in source
    assert source.count("runtime.deserialize_validate(cls, json_data, _VALIDATION_SCHEMA)") == 1


def test_doc_listing_renders_aliases() -> None:
    """Type aliases and their descriptions appear in the simplified listing."""
    compiled = compile_definitions(SchemaStructConfig(schema=load_fixture("tree.json")))
    assert compiled.doc_definitions is not None
    listing = render_doc_definitions(compiled.doc_definitions)
    assert "type TreeNodeDefSpan = tuple[int, int]" in listing
    assert "'Start and end offsets.'" in listing


def test_debug_writes_source_to_sink() -> None:
    """Debug mode dumps the generated module to the given stream."""
    sink = io.StringIO()
    config = SchemaStructConfig(schema=load_fixture("settings.json"), debug=True)
    source = compile_schema(config, debug_sink=sink)
    assert sink.getvalue() == source

    quiet = io.StringIO()
    compile_schema(SchemaStructConfig(schema=load_fixture("settings.json")), debug_sink=quiet)
    assert quiet.getvalue() == ""
