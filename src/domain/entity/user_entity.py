from dataclasses import dataclass
from typing import Optional
from uuid import UUID

EMPTY_ID = UUID(int=0)


@dataclass
class UserEntity:
    """
    ユーザーのビジネスドメインモデル

    idはストアへの挿入時に採番される。未保存のエンティティのみNone（または空UUID）を持つ。
    """
    id: Optional[UUID]
    login: str
    first_name: str = ""
    last_name: str = ""
    current_game_id: Optional[UUID] = None

    def has_id(self) -> bool:
        return self.id is not None and self.id != EMPTY_ID
