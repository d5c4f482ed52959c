"""
共通フィクスチャ

APIテストではユーザーサービスの依存性をインメモリリポジトリに差し替え、
TestClientをコンテキストマネージャーなしで使うことでTortoiseの起動処理を行わない。
"""
import pytest
from fastapi.testclient import TestClient

from src.infra.memory_client.user_repository import InMemoryUserRepository
from src.usecase.user_management.user_mapper import UserMapper
from src.usecase.user_management.user_service import UserService


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def service(repository):
    return UserService(repository, UserMapper())


@pytest.fixture
def client(service):
    from src.infra.rest_api.main import app
    from src.infra.rest_api.dependencies import get_user_service_dependency
    from src.infra.rest_api.rate_limiter import limiter

    app.dependency_overrides[get_user_service_dependency] = lambda: service
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True
