from typing import Optional
from ..usecase.user_management.user_mapper import UserMapper
from ..usecase.user_management.user_service import UserService
from .config import Settings, get_settings
from .memory_client.user_repository import InMemoryUserRepository
from .tortoise_client.user_repository import TortoiseUserRepository
from ..port.user_repository import UserRepository as UserRepositoryPort


class DIContainer:
    """依存性注入コンテナ"""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._user_repository: Optional[UserRepositoryPort] = None
        self._user_mapper: Optional[UserMapper] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def user_repository(self) -> UserRepositoryPort:
        """設定されたバックエンドのユーザーリポジトリ（シングルトン）を取得"""
        if self._user_repository is None:
            if self.settings.repository_backend == "memory":
                self._user_repository = InMemoryUserRepository()
            else:
                self._user_repository = TortoiseUserRepository()
        return self._user_repository

    @property
    def user_mapper(self) -> UserMapper:
        if self._user_mapper is None:
            self._user_mapper = UserMapper()
        return self._user_mapper

    def create_user_service(self) -> UserService:
        """リクエストごとのUserServiceを組み立てる"""
        return UserService(
            self.user_repository,
            self.user_mapper,
            default_page_size=self.settings.default_page_size,
            max_page_size=self.settings.max_page_size,
        )

# グローバルDIコンテナインスタンス
_container = DIContainer()

def get_user_service() -> UserService:
    """ユーザーサービスを取得"""
    return _container.create_user_service()