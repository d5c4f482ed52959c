from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from typing import Dict, Any, List, Optional
from src.infra.logging_config import get_logger
from ..presentators.format_api_output import render_error
from ...domain.exception.user_exceptions import (
    UserException,
    InvalidUserRequestError,
    UserNotFoundError,
    UserValidationError,
)

logger = get_logger("api.errors")

BAD_REQUEST_MESSAGE = "リクエストの内容が不足しています。"
VALIDATION_MESSAGE = "入力データが無効です"


def create_error_response(
    error_type: str,
    user_message: str,
    detail: Any = None,
    status_code: int = 500,
    retry_available: bool = False,
    additional_data: Dict[str, Any] = None,
    request: Optional[Request] = None
) -> Response:
    """統一されたエラーレスポンスを作成（requestがあればAcceptに従ってXMLでも返す）"""
    content = {
        "error_type": error_type,
        "user_message": user_message,
        "retry_available": retry_available
    }

    if detail:
        content["detail"] = detail

    if additional_data:
        content.update(additional_data)

    return render_error(request, jsonable_encoder(content), status_code=status_code)


def _field_errors_from_validation(errors: List[dict]) -> Dict[str, List[str]]:
    """FastAPIのバリデーションエラーを「フィールド名 -> メッセージ一覧」に変換"""
    field_errors: Dict[str, List[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1] if loc else "body"
        field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return field_errors


def _is_malformed_body(errors: List[dict]) -> bool:
    """
    ボディ自体を読めなかったかどうか

    JSONとして不正な場合と、オブジェクトの位置に配列やスカラーが来た場合が該当する。
    フィールド単位の型エラーは含まない。
    """
    for error in errors:
        if error.get("type") == "json_invalid":
            return True
        if tuple(error.get("loc", ())) == ("body",):
            return True
    return False


async def handle_user_exception(request: Request, exc: UserException):
    """ユーザー例外のハンドリング"""
    status_code_map = {
        InvalidUserRequestError: status.HTTP_400_BAD_REQUEST,
        UserNotFoundError: status.HTTP_404_NOT_FOUND,
        UserValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    }
    user_message_map = {
        InvalidUserRequestError: BAD_REQUEST_MESSAGE,
        UserNotFoundError: "ユーザーが見つかりません。",
        UserValidationError: VALIDATION_MESSAGE,
    }

    status_code = status_code_map.get(type(exc), status.HTTP_400_BAD_REQUEST)

    logger.warning(
        f"User exception: {exc.__class__.__name__}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.error_code,
            "error": str(exc)
        }
    )

    additional_data = None
    if isinstance(exc, UserValidationError):
        additional_data = {"errors": exc.errors}

    return create_error_response(
        error_type=exc.error_code or "user_error",
        user_message=user_message_map.get(type(exc), str(exc)),
        detail=str(exc),
        status_code=status_code,
        retry_available=False,
        additional_data=additional_data,
        request=request
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """FastAPIバリデーションエラーのハンドリング（読めないボディは400）"""
    errors = exc.errors()
    malformed = _is_malformed_body(errors)

    logger.warning(
        "Malformed request body" if malformed else "FastAPI validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": jsonable_encoder(errors)
        }
    )

    if malformed:
        return create_error_response(
            error_type=InvalidUserRequestError().error_code,
            user_message=BAD_REQUEST_MESSAGE,
            detail=errors,
            status_code=status.HTTP_400_BAD_REQUEST,
            retry_available=False,
            request=request
        )

    return create_error_response(
        error_type="validation_error",
        user_message=VALIDATION_MESSAGE,
        detail=errors,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        retry_available=False,
        additional_data={"errors": _field_errors_from_validation(errors)},
        request=request
    )


async def handle_generic_error(request: Request, exc: Exception):
    """その他のエラーのハンドリング"""
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
            "error_type": type(exc).__name__
        },
        exc_info=True
    )

    return create_error_response(
        error_type="internal_error",
        user_message="予期しないエラーが発生しました。問題が続く場合はサポートにお問い合わせください。",
        detail=str(exc) if request.app.debug else None,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_available=True,
        request=request
    )
