from typing import Optional, Union
from uuid import UUID

from ...domain.entity.user_entity import UserEntity
from ...port.dto.user_dto import UserCreateDto, UserUpdateDto, UserDto


class UserMapper:
    """
    ワイヤー用DTOとドメインエンティティの相互変換
    """

    def to_user_dto(self, entity: UserEntity) -> UserDto:
        return UserDto(
            current_game_id=entity.current_game_id,
            full_name=f"{entity.last_name} {entity.first_name}",
        )

    def to_entity(self, dto: Union[UserCreateDto, UserUpdateDto], user_id: Optional[UUID] = None) -> UserEntity:
        return UserEntity(
            id=user_id,
            login=dto.login or "",
            first_name=dto.first_name or "",
            last_name=dto.last_name or "",
        )

    def merge(self, dto: UserUpdateDto, entity: UserEntity) -> UserEntity:
        """DTOのフィールドを既存エンティティに上書きする（IDとcurrent_game_idは保持）"""
        entity.login = dto.login or ""
        entity.first_name = dto.first_name or ""
        entity.last_name = dto.last_name or ""
        return entity
