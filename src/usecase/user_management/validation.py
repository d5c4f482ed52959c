"""
ユーザーDTOのバリデーション

フィールドごとの制約を明示的な関数として評価し、ミューテーションの前に
エラーを収集する。エラーはModelStateに「フィールド名 -> メッセージ一覧」で蓄積される。
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ...port.dto.user_dto import UserCreateDto, UserUpdateDto

LOGIN_REQUIRED_MESSAGE = "ログインは必須です"
LOGIN_CHARSET_MESSAGE = "ログインは英字と数字のみで構成してください"


@dataclass
class FieldError:
    field: str
    message: str


class ModelState:
    """リクエスト処理中に発生したフィールドエラーの蓄積"""

    def __init__(self):
        self._errors: Dict[str, List[str]] = {}

    def add_error(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def add_errors(self, errors: List[FieldError]) -> None:
        for error in errors:
            self.add_error(error.field, error.message)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    def to_dict(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}


def is_valid_login(login: Optional[str]) -> bool:
    """英字と数字のみならTrue（空文字列は文字種としては許容）"""
    if login is None:
        return True
    return all(ch.isalnum() for ch in login)


def validate_user_dto(dto: Union[UserCreateDto, UserUpdateDto], login_required: bool) -> List[FieldError]:
    errors: List[FieldError] = []

    if dto.login is not None and not isinstance(dto.login, str):
        errors.append(FieldError("login", "login must be a string"))
    elif login_required and not (dto.login or "").strip():
        errors.append(FieldError("login", LOGIN_REQUIRED_MESSAGE))
    elif not is_valid_login(dto.login):
        errors.append(FieldError("login", LOGIN_CHARSET_MESSAGE))

    for name, wire_name in (("first_name", "firstName"), ("last_name", "lastName")):
        value = getattr(dto, name)
        if value is not None and not isinstance(value, str):
            errors.append(FieldError(wire_name, f"{wire_name} must be a string"))

    return errors
