from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from src.infra.config import get_settings
from src.infra.logging_config import LoggingMiddleware, get_logger

from .routers.users import router as users_router
from .error_handlers import (
    handle_user_exception,
    handle_validation_exception,
    handle_generic_error,
)
from .rate_limiter import limiter, rate_limit_error_handler
from ...domain.exception.user_exceptions import UserException

API_VERSION = "0.1.0"

# Initialize settings and logger
settings = get_settings()
logger = get_logger("app", level=settings.effective_log_level, log_file=settings.log_file)
# ユースケース層のモジュールロガー（logging.getLogger(__name__)）もJSONで出力する
get_logger("src", level=settings.effective_log_level, log_file=settings.log_file)

app = FastAPI(
    title="Users API",
    version=API_VERSION
)

# レート制限の設定
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_error_handler)
app.add_middleware(SlowAPIMiddleware)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS 設定（環境設定に基づく）
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "X-Pagination"],
)

app.include_router(users_router)


def _ensure_sqlite_directory(database_url: str) -> None:
    if database_url.startswith("sqlite://") and ":memory:" not in database_url:
        Path(database_url[len("sqlite://"):]).parent.mkdir(parents=True, exist_ok=True)


@app.on_event("startup")
async def startup_event():
    """アプリケーション起動時の初期化処理"""
    logger.info(
        "Application starting up",
        extra={"environment": settings.environment, "repository_backend": settings.repository_backend}
    )

    if settings.repository_backend != "tortoise":
        return

    # Tortoise ORM初期化
    from tortoise import Tortoise
    from src.infra.tortoise_client.config import build_tortoise_config

    _ensure_sqlite_directory(settings.database_url)
    await Tortoise.init(config=build_tortoise_config(settings.database_url))
    if settings.generate_schemas:
        await Tortoise.generate_schemas(safe=True)
    logger.info("Tortoise ORM initialized")


@app.on_event("shutdown")
async def shutdown_event():
    """アプリケーション終了時のクリーンアップ"""
    if settings.repository_backend == "tortoise":
        from tortoise import Tortoise
        await Tortoise.close_connections()
    logger.info("Application shutdown complete")


@app.get("/api/health")
async def health_check():
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy", "version": API_VERSION}

# エラーハンドラーの登録
app.add_exception_handler(UserException, handle_user_exception)
app.add_exception_handler(RequestValidationError, handle_validation_exception)
app.add_exception_handler(Exception, handle_generic_error)


#uvicorn src.infra.rest_api.main:app --reload
