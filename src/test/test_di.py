"""DIコンテナのテスト"""
from src.infra.config import Settings
from src.infra.di import DIContainer
from src.infra.memory_client.user_repository import InMemoryUserRepository
from src.infra.tortoise_client.user_repository import TortoiseUserRepository


class TestDIContainer:
    def test_memory_backend(self):
        container = DIContainer(Settings(repository_backend="memory"))

        assert isinstance(container.user_repository, InMemoryUserRepository)
        # シングルトンであること
        assert container.user_repository is container.user_repository

    def test_tortoise_backend(self):
        container = DIContainer(Settings(repository_backend="tortoise"))

        assert isinstance(container.user_repository, TortoiseUserRepository)

    def test_user_service_uses_configured_page_sizes(self):
        container = DIContainer(Settings(repository_backend="memory", default_page_size=5, max_page_size=8))

        service = container.create_user_service()

        assert service.clamp_paging(1, None) == (1, 5)
        assert service.clamp_paging(1, 100) == (1, 8)

    def test_services_share_repository(self):
        container = DIContainer(Settings(repository_backend="memory"))

        first = container.create_user_service()
        second = container.create_user_service()

        assert first is not second
        assert first._user_repository is second._user_repository
