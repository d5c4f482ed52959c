"""
FastAPI依存性注入の定義

このモジュールは、FastAPIエンドポイントで使用される依存性注入関数を提供します。
DIコンテナから適切なサービスインスタンスを取得し、FastAPIの依存性システムに
統合するためのアダプターレイヤーとして機能します。
"""

from ..di import get_user_service
from ...usecase.user_management.user_service import UserService


def get_user_service_dependency() -> UserService:
    """
    ユーザーサービスの依存性を取得

    テストでは app.dependency_overrides でこの関数を差し替える。

    Returns:
        UserService: リポジトリとマッパーを組み込んだユーザーサービス
    """
    return get_user_service()
