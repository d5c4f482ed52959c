from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from ...port.dto.user_dto import UserCreateDto, UserUpdateDto


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreateRequest(CamelModel):
    login: Optional[str] = None
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""

    def to_dto(self) -> UserCreateDto:
        return UserCreateDto(
            login=self.login,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
        )


class UserUpdateRequest(CamelModel):
    login: Optional[str] = ""
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""

    def to_dto(self) -> UserUpdateDto:
        return UserUpdateDto(
            login=self.login or "",
            first_name=self.first_name or "",
            last_name=self.last_name or "",
        )


class UserResponse(CamelModel):
    current_game_id: Optional[str] = None
    full_name: str


class PaginationMetadata(CamelModel):
    """X-Paginationヘッダーに載せるページング情報"""
    previous_page_link: Optional[str] = None
    next_page_link: Optional[str] = None
    total_count: int
    page_size: int
    current_page: int
    total_pages: int

    def to_header(self) -> str:
        return self.model_dump_json(by_alias=True)
