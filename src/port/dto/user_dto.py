from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass
class UserCreateDto:
    """
    ユーザー作成用DTO
    """
    login: Optional[str] = None
    first_name: str = ""
    last_name: str = ""


@dataclass
class UserUpdateDto:
    """
    ユーザー更新用DTO（PUTの全置換とPATCHの適用先）
    """
    login: str = ""
    first_name: str = ""
    last_name: str = ""


@dataclass
class UserDto:
    """
    レスポンス用ユーザー情報DTO
    """
    current_game_id: Optional[UUID]
    full_name: str
