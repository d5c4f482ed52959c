"""
JSON Patchドキュメントの適用

RFC 6902の操作（add / remove / replace / copy / move / test）を、
フラットなDTOのフィールドに対する名前付き操作として適用する。
特定のホストのパッチライブラリには依存しない。
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from ...domain.exception.user_exceptions import InvalidUserRequestError
from .validation import ModelState

SUPPORTED_OPERATIONS = ("add", "remove", "replace", "copy", "move", "test")

_MISSING = object()


@dataclass
class PatchOperation:
    op: str
    path: str
    value: Any = None
    from_: Optional[str] = None


class PatchOperationError(Exception):
    """単一のパッチ操作が適用できない場合の例外"""
    pass


def parse_patch_document(document: Any) -> List[PatchOperation]:
    """
    リクエストボディをパッチ操作の列に変換する

    Raises:
        InvalidUserRequestError: ドキュメントがnull、または操作オブジェクトのリストでない場合
    """
    if document is None or not isinstance(document, list):
        raise InvalidUserRequestError("Patch document must be a list of operations")

    operations = []
    for raw in document:
        if not isinstance(raw, dict):
            raise InvalidUserRequestError("Patch operation must be an object")
        operations.append(
            PatchOperation(
                op=str(raw.get("op", "")).lower(),
                path=raw.get("path") or "",
                value=raw.get("value"),
                from_=raw.get("from"),
            )
        )
    return operations


def _field_lookup(target: Any) -> Dict[str, str]:
    lookup = {}
    for f in fields(target):
        lookup[f.name.lower()] = f.name
        lookup[f.name.replace("_", "").lower()] = f.name
    return lookup


def _resolve_field(target: Any, path: Optional[str]) -> str:
    if not isinstance(path, str) or not path.startswith("/"):
        raise PatchOperationError(f"The path '{path}' is not a valid JSON pointer.")

    segment = path[1:]
    if not segment or "/" in segment:
        raise PatchOperationError(f"The target location specified by path '{path}' was not found.")

    name = _field_lookup(target).get(segment.lower())
    if name is None:
        raise PatchOperationError(f"The target location specified by path segment '{segment}' was not found.")
    return name


def _default_value(target: Any, name: str) -> Any:
    for f in fields(target):
        if f.name == name:
            return f.default
    return None


def apply_operation(operation: PatchOperation, target: Any) -> None:
    if operation.op not in SUPPORTED_OPERATIONS:
        raise PatchOperationError(f"Invalid JSON Patch operation '{operation.op}'.")

    name = _resolve_field(target, operation.path)

    if operation.op in ("add", "replace"):
        setattr(target, name, operation.value)
    elif operation.op == "remove":
        setattr(target, name, _default_value(target, name))
    elif operation.op in ("copy", "move"):
        source = _resolve_field(target, operation.from_)
        value = getattr(target, source)
        if operation.op == "move":
            setattr(target, source, _default_value(target, source))
        setattr(target, name, value)
    elif operation.op == "test":
        current = getattr(target, name)
        if current != operation.value:
            raise PatchOperationError(
                f"The current value '{current}' at path '{operation.path}' "
                f"is not equal to the test value '{operation.value}'."
            )


def apply_patch(operations: List[PatchOperation], target: Any, model_state: ModelState) -> Any:
    """
    パッチ操作を順に適用する

    失敗した操作ごとにDTO型名をキーとしてModelStateへエラーを記録し、
    後続の操作の適用は継続する。
    """
    error_key = type(target).__name__
    for operation in operations:
        try:
            apply_operation(operation, target)
        except PatchOperationError as e:
            model_state.add_error(error_key, str(e))
    return target
