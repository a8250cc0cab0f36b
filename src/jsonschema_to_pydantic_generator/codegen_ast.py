"""AST-based Python code generation for compiled schemas."""

from __future__ import annotations

import ast
from collections.abc import Iterable
from typing import Optional

from .config import Visibility
from .model_types import (
    CompiledSchema,
    DefaultFunctionDef,
    Definition,
    EnumClassDef,
    ModelClassDef,
    ModelFieldDef,
    TypeAliasDef,
)

RUNTIME_MODULE = "jsonschema_to_pydantic_generator"
VALIDATION_SCHEMA_NAME = "_VALIDATION_SCHEMA"

_TYPING_IMPORT_ORDER: tuple[str, ...] = ("Optional",)

_PYDANTIC_IMPORT_ORDER: tuple[str, ...] = (
    "BaseModel",
    "ConfigDict",
    "Field",
)

_FROM_JSON_TEMPLATE = '''
@classmethod
def from_json(cls, json_data: str) -> {name}:
    """Deserializes a JSON string into this type."""
    return {call}
'''

_TO_JSON_TEMPLATE = '''
def to_json(self) -> str:
    """Serializes this type into a JSON string."""
    return runtime.serialize(self)
'''


def render_module(compiled: CompiledSchema) -> str:
    """Render compiled definitions as a Python module using AST.

    Args:
        compiled (CompiledSchema): Emitted definitions to render.

    Returns:
        str: Generated Python source code.
    """
    body: list[ast.stmt] = [
        ast.Expr(value=ast.Constant(value=f"Models generated from the `{compiled.name}` JSON schema.")),
        ast.ImportFrom(module="__future__", names=[ast.alias(name="annotations")], level=0),
    ]
    body.extend(_build_imports(compiled.definitions))
    body.append(_exports(compiled))

    if compiled.validation_schema is not None:
        body.append(
            ast.Assign(
                targets=[ast.Name(id=VALIDATION_SCHEMA_NAME, ctx=ast.Store())],
                value=ast.Constant(value=compiled.validation_schema),
            )
        )

    top_level_doc = _top_level_docstring(compiled)
    for definition in compiled.definitions:
        body.extend(_definition_to_ast(definition, top_level_doc=top_level_doc, compiled=compiled))

    for definition in compiled.definitions:
        if isinstance(definition, ModelClassDef):
            body.append(_stmt(f"{definition.name}.model_rebuild()"))

    module = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(module)
    return ast.unparse(module) + "\n"


def render_doc_definitions(definitions: Iterable[Definition]) -> str:
    """Render the simplified listing of definitions embedded in documentation.

    Models keep their docstrings and bare field annotations; entry points,
    field metadata and default producers are left out.
    """
    body: list[ast.stmt] = []
    for definition in definitions:
        match definition:
            case ModelClassDef():
                class_body = _docstring_body(definition.description)
                for field in definition.fields:
                    class_body.append(
                        ast.AnnAssign(
                            target=ast.Name(id=field.name, ctx=ast.Store()),
                            annotation=_expr(field.annotation),
                            value=None,
                            simple=1,
                        )
                    )
                body.append(_class_def(definition.name, "BaseModel", class_body))
            case EnumClassDef():
                class_body = _docstring_body(definition.description)
                class_body.extend(_enum_members(definition))
                body.append(_class_def(definition.name, "Enum", class_body))
            case TypeAliasDef():
                body.extend(_type_alias(definition))
    module = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(module)
    return ast.unparse(module)


def _top_level_docstring(compiled: CompiledSchema) -> Optional[str]:
    if compiled.doc_definitions is None:
        return compiled.description
    description = f"{compiled.description}\n\n" if compiled.description else ""
    listing = render_doc_definitions(compiled.doc_definitions)
    return f"{description}# Full definition\n\n```\n{listing}\n```"


def _definition_to_ast(
    definition: Definition,
    *,
    top_level_doc: Optional[str],
    compiled: CompiledSchema,
) -> list[ast.stmt]:
    match definition:
        case ModelClassDef():
            return [_model_to_ast(definition, top_level_doc=top_level_doc, compiled=compiled)]
        case EnumClassDef():
            class_body = _docstring_body(definition.description)
            class_body.extend(_enum_members(definition))
            class_body.extend(_entry_points(definition.name, validation_schema=None))
            return [_class_def(definition.name, "Enum", class_body)]
        case TypeAliasDef():
            return _type_alias(definition)
        case DefaultFunctionDef():
            return [_default_function(definition)]
    raise TypeError(f"Unsupported definition: {definition!r}")


def _model_to_ast(
    model: ModelClassDef,
    *,
    top_level_doc: Optional[str],
    compiled: CompiledSchema,
) -> ast.ClassDef:
    docstring = top_level_doc if model.top_level else model.description
    class_body = _docstring_body(docstring)
    class_body.append(
        ast.Assign(
            targets=[ast.Name(id="model_config", ctx=ast.Store())],
            value=ast.Call(
                func=ast.Name(id="ConfigDict", ctx=ast.Load()),
                args=[],
                keywords=[
                    ast.keyword(arg="strict", value=ast.Constant(value=True)),
                    ast.keyword(arg="validate_by_name", value=ast.Constant(value=True)),
                    ast.keyword(arg="protected_namespaces", value=ast.Tuple(elts=[], ctx=ast.Load())),
                ],
            ),
        )
    )
    for field in model.fields:
        class_body.append(_field_to_ast(field))

    validation_schema = compiled.validation_schema if model.top_level else None
    class_body.extend(_entry_points(model.name, validation_schema=validation_schema))
    return _class_def(model.name, "BaseModel", class_body)


def _field_to_ast(field: ModelFieldDef) -> ast.AnnAssign:
    args: list[ast.expr] = []
    keywords: list[ast.keyword] = []
    if field.default_factory is not None:
        keywords.append(
            ast.keyword(arg="default_factory", value=ast.Name(id=field.default_factory, ctx=ast.Load()))
        )
    elif field.default is not None:
        args.append(_expr(field.default))
    else:
        args.append(ast.Constant(value=Ellipsis))

    if field.alias is not None:
        keywords.append(ast.keyword(arg="alias", value=ast.Constant(value=field.alias)))
    if field.description is not None:
        keywords.append(ast.keyword(arg="description", value=ast.Constant(value=field.description)))

    call = ast.Call(
        func=ast.Name(id="Field", ctx=ast.Load()),
        args=args,
        keywords=keywords,
    )

    return ast.AnnAssign(
        target=ast.Name(id=field.name, ctx=ast.Store()),
        annotation=_expr(field.annotation),
        value=call,
        simple=1,
    )


def _enum_members(enum_def: EnumClassDef) -> list[ast.stmt]:
    return [
        ast.Assign(
            targets=[ast.Name(id=variant.name, ctx=ast.Store())],
            value=ast.Constant(value=variant.value),
        )
        for variant in enum_def.variants
    ]


def _entry_points(name: str, *, validation_schema: Optional[str]) -> list[ast.stmt]:
    if validation_schema is None:
        call = "runtime.deserialize(cls, json_data)"
    else:
        call = f"runtime.deserialize_validate(cls, json_data, {VALIDATION_SCHEMA_NAME})"
    return [
        *_stmts(_FROM_JSON_TEMPLATE.format(name=name, call=call)),
        *_stmts(_TO_JSON_TEMPLATE),
    ]


def _type_alias(alias: TypeAliasDef) -> list[ast.stmt]:
    statements: list[ast.stmt] = [
        ast.TypeAlias(
            name=ast.Name(id=alias.name, ctx=ast.Store()),
            type_params=[],
            value=_expr(alias.annotation),
        )
    ]
    if alias.description:
        statements.append(ast.Expr(value=ast.Constant(value=alias.description)))
    return statements


def _default_function(function: DefaultFunctionDef) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=function.name,
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=[ast.Return(value=_expr(function.expression))],
        decorator_list=[],
        returns=_expr(function.annotation),
        type_params=[],
    )


def _class_def(name: str, base: str, body: list[ast.stmt]) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=[ast.Name(id=base, ctx=ast.Load())],
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=[],
        type_params=[],
    )


def _docstring_body(docstring: Optional[str]) -> list[ast.stmt]:
    if not docstring:
        return []
    return [ast.Expr(value=ast.Constant(value=docstring))]


def _exports(compiled: CompiledSchema) -> ast.Assign:
    names = compiled.exported_names if compiled.visibility is Visibility.PUBLIC else ()
    return ast.Assign(
        targets=[ast.Name(id="__all__", ctx=ast.Store())],
        value=ast.List(elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()),
    )


def _expr(code: str) -> ast.expr:
    parsed = ast.parse(code, mode="eval")
    return parsed.body


def _stmt(code: str) -> ast.stmt:
    return ast.parse(code).body[0]


def _stmts(code: str) -> list[ast.stmt]:
    return ast.parse(code.strip()).body


def _build_imports(definitions: tuple[Definition, ...]) -> list[ast.stmt]:
    used_annotation_names = _collect_used_annotation_names(definitions)
    typing_imports = [name for name in _TYPING_IMPORT_ORDER if name in used_annotation_names]

    imports: list[ast.stmt] = []
    if any(isinstance(definition, EnumClassDef) for definition in definitions):
        imports.append(
            ast.ImportFrom(module="enum", names=[ast.alias(name="Enum")], level=0)
        )
    if typing_imports:
        imports.append(
            ast.ImportFrom(
                module="typing",
                names=[ast.alias(name=name) for name in typing_imports],
                level=0,
            )
        )
    imports.append(
        ast.ImportFrom(
            module="pydantic",
            names=[ast.alias(name=name) for name in _PYDANTIC_IMPORT_ORDER],
            level=0,
        )
    )
    imports.append(
        ast.ImportFrom(module=RUNTIME_MODULE, names=[ast.alias(name="runtime")], level=0)
    )
    return imports


def _collect_used_annotation_names(definitions: tuple[Definition, ...]) -> set[str]:
    names: set[str] = set()
    for annotation in _iter_annotation_exprs(definitions):
        names.update(_extract_loaded_names(annotation))
    return names


def _iter_annotation_exprs(definitions: tuple[Definition, ...]) -> Iterable[str]:
    for definition in definitions:
        match definition:
            case ModelClassDef(fields=fields):
                for field in fields:
                    yield field.annotation
            case TypeAliasDef(annotation=annotation) | DefaultFunctionDef(annotation=annotation):
                yield annotation


def _extract_loaded_names(expr_code: str) -> set[str]:
    parsed = ast.parse(expr_code, mode="eval")
    loaded_names: set[str] = set()
    for node in ast.walk(parsed):
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load):
            loaded_names.add(node.id)
    return loaded_names
