from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response

from src.infra.config import get_settings
from .error_handlers import create_error_response

_settings = get_settings()

# レート制限の設定（全エンドポイントに既定の制限を適用）
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.rate_limit],
    enabled=_settings.rate_limit_enabled,
)

# レート制限エラーハンドラー
def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> Response:
    response = create_error_response(
        error_type="rate_limited",
        user_message="リクエストが多すぎます。しばらく待ってから再試行してください。",
        detail=str(exc.detail) if hasattr(exc, "detail") else None,
        status_code=429,
        retry_available=True,
        request=request
    )
    response.headers["Retry-After"] = str(exc.retry_after) if hasattr(exc, "retry_after") else "60"
    return response
