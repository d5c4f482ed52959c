from typing import Protocol, Optional, Tuple
from uuid import UUID

from ..domain.entity.user_entity import UserEntity
from ..domain.entity.page_list import PageList


class UserRepository(Protocol):
    """
    ユーザーデータの永続化インターフェース。

    各メソッドは単独で原子的に実行されることを前提とし、呼び出しをまたぐ
    トランザクションは扱わない。
    """

    async def find_by_id(self, user_id: UUID) -> Optional[UserEntity]:
        ...

    async def insert(self, user: UserEntity) -> UserEntity:
        """新しいIDを採番して挿入し、IDが設定されたエンティティを返す"""
        ...

    async def update(self, user: UserEntity) -> bool:
        """user.idのレコードを更新する。対象がなければ何もせずFalseを返す"""
        ...

    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        """
        user.idのレコードがあれば更新、なければそのIDで挿入する。

        Returns:
            (保存後のエンティティ, 挿入されたかどうか)
        """
        ...

    async def delete(self, user_id: UUID) -> None:
        ...

    async def get_page(self, page_number: int, page_size: int) -> PageList[UserEntity]:
        ...
