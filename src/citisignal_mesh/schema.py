from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional

from graphql import ExecutionResult, GraphQLError, GraphQLObjectType, GraphQLSchema, build_schema, get_operation_ast, graphql_sync, parse

from .resolvers import merge_resolvers


SCHEMA_PATH = Path(__file__).with_name("schema.graphql")


def load_type_defs() -> str:
    return SCHEMA_PATH.read_text(encoding="utf-8")


def bind_resolvers(schema: GraphQLSchema, resolvers: Dict) -> GraphQLSchema:
    for type_name, fields in resolvers.items():
        gql_type = schema.get_type(type_name)
        if not isinstance(gql_type, GraphQLObjectType):
            raise ValueError(f"Resolvers given for unknown object type {type_name}")
        for field_name, resolver in fields.items():
            if field_name not in gql_type.fields:
                raise ValueError(f"Resolver given for unknown field {type_name}.{field_name}")
            gql_type.fields[field_name].resolve = resolver
    return schema


def create_schema() -> GraphQLSchema:
    return bind_resolvers(build_schema(load_type_defs()), merge_resolvers())


_SCHEMA: Optional[GraphQLSchema] = None


def get_schema() -> GraphQLSchema:
    global _SCHEMA
    if _SCHEMA is None:
        _SCHEMA = create_schema()
    return _SCHEMA


def execute(
    query: str,
    context: Any,
    variables: Optional[Dict] = None,
    operation_name: Optional[str] = None,
) -> ExecutionResult:
    return graphql_sync(
        get_schema(),
        query,
        context_value=context,
        variable_values=variables,
        operation_name=operation_name,
    )


def operation_type(query: str, operation_name: Optional[str] = None) -> Optional[str]:
    """Operation kind the request would run, or None when it does not parse or select one."""
    try:
        document = parse(query)
    except GraphQLError:
        return None
    operation = get_operation_ast(document, operation_name)
    return operation.operation.value if operation else None


def result_to_dict(result: ExecutionResult) -> Dict:
    out: Dict[str, Any] = {"data": result.data}
    if result.errors:
        out["errors"] = [e.formatted for e in result.errors]
    return out
