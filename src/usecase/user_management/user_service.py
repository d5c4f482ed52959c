"""
User management service - use case layer

ルーターから受け取った入力を検証し、リポジトリとマッパーに委譲する。
HTTPの知識は持たず、結果は戻り値またはドメイン例外で表現する。
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from src.domain.entity.page_list import PageList
from src.domain.entity.user_entity import EMPTY_ID
from src.domain.exception.user_exceptions import (
    InvalidUserRequestError,
    UserNotFoundError,
    UserValidationError,
)
from src.port.dto.user_dto import UserCreateDto, UserUpdateDto, UserDto
from src.port.user_repository import UserRepository
from .json_patch import apply_patch, parse_patch_document
from .user_mapper import UserMapper
from .validation import ModelState, validate_user_dto

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 20


@dataclass
class UpsertResult:
    user_id: UUID
    created: bool


def _is_empty_id(user_id: Optional[UUID]) -> bool:
    return user_id is None or user_id == EMPTY_ID


class UserService:
    """Service for user CRUD operations"""

    def __init__(self,
                 user_repository: UserRepository,
                 mapper: Optional[UserMapper] = None,
                 default_page_size: int = DEFAULT_PAGE_SIZE,
                 max_page_size: int = MAX_PAGE_SIZE):
        self._user_repository = user_repository
        self._mapper = mapper or UserMapper()
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self.logger = logging.getLogger(__name__)

    async def get_user_by_id(self, user_id: Optional[UUID]) -> UserDto:
        user = None if user_id is None else await self._user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return self._mapper.to_user_dto(user)

    async def create_user(self, dto: Optional[UserCreateDto]) -> UUID:
        if dto is None:
            raise InvalidUserRequestError("User body is required")

        self._ensure_valid(dto, login_required=True)

        entity = self._mapper.to_entity(dto)
        entity = await self._user_repository.insert(entity)
        self.logger.info(f"User {entity.id} created")
        return entity.id

    async def update_user(self, user_id: Optional[UUID], dto: Optional[UserUpdateDto]) -> UpsertResult:
        """
        ユーザーを全置換する（アップサート）

        既存のユーザーがあればDTOをマージし、なければルートのIDを持つ新しい
        エンティティを作る。IDが空の場合はストアが採番して挿入する。
        """
        if dto is None or user_id is None:
            raise InvalidUserRequestError("User body and id are required")

        self._ensure_valid(dto, login_required=False)

        user = await self._user_repository.find_by_id(user_id)
        if user is not None:
            user = self._mapper.merge(dto, user)
        else:
            user = self._mapper.to_entity(dto, user_id=user_id)

        if user.has_id():
            user, is_inserted = await self._user_repository.update_or_insert(user)
            if not is_inserted:
                self.logger.info(f"User {user.id} updated")
                return UpsertResult(user_id=user.id, created=False)
        else:
            user = await self._user_repository.insert(user)

        self.logger.info(f"User {user.id} created by upsert")
        return UpsertResult(user_id=user.id, created=True)

    async def partially_update_user(self, user_id: Optional[UUID], patch_document: Any) -> None:
        """
        JSON Patchでユーザーを更新する

        パッチは空のUserUpdateDtoに適用されるため、パッチで触れていない
        フィールドはDTOの既定値で上書きされる。
        """
        operations = parse_patch_document(patch_document)

        if _is_empty_id(user_id):
            raise UserNotFoundError(f"User not found: {user_id}")

        model_state = ModelState()
        update_dto = apply_patch(operations, UserUpdateDto(), model_state)
        model_state.add_errors(validate_user_dto(update_dto, login_required=False))
        if not model_state.is_valid:
            raise UserValidationError(model_state.to_dict())

        if await self._user_repository.find_by_id(user_id) is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        user = self._mapper.to_entity(update_dto, user_id=user_id)
        if not await self._user_repository.update(user):
            # 検索と更新の間に削除された
            raise UserNotFoundError(f"User not found: {user_id}")
        self.logger.info(f"User {user_id} patched with {len(operations)} operations")

    async def delete_user(self, user_id: Optional[UUID]) -> None:
        if _is_empty_id(user_id) or await self._user_repository.find_by_id(user_id) is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        await self._user_repository.delete(user_id)
        self.logger.info(f"User {user_id} deleted")

    async def get_users(self, page_number: int = 1, page_size: Optional[int] = None) -> PageList[UserDto]:
        page_number, page_size = self.clamp_paging(page_number, page_size)

        page = await self._user_repository.get_page(page_number, page_size)
        return PageList(
            items=[self._mapper.to_user_dto(user) for user in page.items],
            current_page=page.current_page,
            page_size=page.page_size,
            total_count=page.total_count,
        )

    def clamp_paging(self, page_number: Optional[int], page_size: Optional[int]) -> tuple:
        if page_number is None:
            page_number = 1
        if page_size is None:
            page_size = self._default_page_size
        return max(page_number, 1), min(max(page_size, 1), self._max_page_size)

    def _ensure_valid(self, dto, login_required: bool) -> None:
        model_state = ModelState()
        model_state.add_errors(validate_user_dto(dto, login_required=login_required))
        if not model_state.is_valid:
            raise UserValidationError(model_state.to_dict())

