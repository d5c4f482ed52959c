import asyncio
from dataclasses import replace
from typing import Dict, Optional, Tuple
from uuid import UUID, uuid4

from ...port.user_repository import UserRepository
from ...domain.entity.user_entity import UserEntity
from ...domain.entity.page_list import PageList


class InMemoryUserRepository(UserRepository):
    """
    プロセス内の辞書を用いた UserRepository の実装

    保存・取得時にはコピーを受け渡し、呼び出し側の変更がストアに漏れないようにする。
    """

    def __init__(self):
        self._users: Dict[UUID, UserEntity] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UUID) -> Optional[UserEntity]:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def insert(self, user: UserEntity) -> UserEntity:
        async with self._lock:
            stored = replace(user, id=uuid4())
            self._users[stored.id] = stored
            return replace(stored)

    async def update(self, user: UserEntity) -> bool:
        async with self._lock:
            if user.id not in self._users:
                return False
            self._users[user.id] = replace(user)
            return True

    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        async with self._lock:
            is_inserted = user.id not in self._users
            self._users[user.id] = replace(user)
            return replace(user), is_inserted

    async def delete(self, user_id: UUID) -> None:
        async with self._lock:
            self._users.pop(user_id, None)

    async def get_page(self, page_number: int, page_size: int) -> PageList[UserEntity]:
        ordered = sorted(self._users.values(), key=lambda u: (u.login, str(u.id)))
        offset = (page_number - 1) * page_size
        return PageList(
            items=[replace(user) for user in ordered[offset:offset + page_size]],
            current_page=page_number,
            page_size=page_size,
            total_count=len(ordered),
        )
