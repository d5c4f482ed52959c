from typing import Optional, Tuple
from uuid import UUID, uuid4

from ...port.user_repository import UserRepository
from ...domain.entity.user_entity import UserEntity
from ...domain.entity.page_list import PageList
from .models import User


def _to_entity(user: User) -> UserEntity:
    return UserEntity(
        id=user.id if isinstance(user.id, UUID) else UUID(str(user.id)),
        login=user.login,
        first_name=user.first_name,
        last_name=user.last_name,
        current_game_id=user.current_game_id,
    )


class TortoiseUserRepository(UserRepository):
    """
    Tortoise ORM を用いた UserRepository の実装
    """

    async def find_by_id(self, user_id: UUID) -> Optional[UserEntity]:
        user = await User.filter(id=user_id).first()
        if not user:
            return None
        return _to_entity(user)

    async def insert(self, user: UserEntity) -> UserEntity:
        # IDは常にストア側で採番する
        created = await User.create(
            id=uuid4(),
            login=user.login,
            first_name=user.first_name,
            last_name=user.last_name,
            current_game_id=user.current_game_id,
        )
        return _to_entity(created)

    async def update(self, user: UserEntity) -> bool:
        updated = await User.filter(id=user.id).update(
            login=user.login,
            first_name=user.first_name,
            last_name=user.last_name,
            current_game_id=user.current_game_id,
        )
        return updated > 0

    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        saved, created = await User.update_or_create(
            id=user.id,
            defaults={
                "login": user.login,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "current_game_id": user.current_game_id,
            },
        )
        return _to_entity(saved), created

    async def delete(self, user_id: UUID) -> None:
        await User.filter(id=user_id).delete()

    async def get_page(self, page_number: int, page_size: int) -> PageList[UserEntity]:
        """ログイン順でページを取得"""
        offset = (page_number - 1) * page_size
        total_count = await User.all().count()
        users = await User.all().order_by("login", "id").offset(offset).limit(page_size)
        return PageList(
            items=[_to_entity(user) for user in users],
            current_page=page_number,
            page_size=page_size,
            total_count=total_count,
        )
