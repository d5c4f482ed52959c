"""
ユーザー関連の例外クラス

このモジュールは、ユーザー管理に関する様々な例外を定義します。
リクエスト不正、未検出、バリデーション失敗をHTTP層とは独立に表現し、
エラーハンドラーがそれぞれ400/404/422に変換します。
"""
from typing import Dict, List


class UserException(Exception):
    """ユーザー操作に関する例外の基底クラス"""
    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidUserRequestError(UserException):
    """リクエストボディやルート値が欠けている場合の例外"""
    def __init__(self, message: str = "Request body or route value is missing"):
        super().__init__(message, "bad_request")


class UserNotFoundError(UserException):
    """指定されたユーザーが見つからない場合の例外"""
    def __init__(self, message: str):
        super().__init__(message, "user_not_found")


class UserValidationError(UserException):
    """入力モデルが不正な場合の例外。フィールドごとのエラーを保持する。"""
    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("User model is invalid", "validation_error")
        self.errors = errors
