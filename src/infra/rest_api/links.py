"""
ルート名とパラメータからURIを組み立てる

ルーターに依存しない純粋関数として、Locationヘッダーやページングリンクの生成に使う。
"""
from typing import Any, Dict
from urllib.parse import urlencode

ROUTES: Dict[str, str] = {
    "get_user_by_id": "/api/users/{userId}",
    "get_users": "/api/users",
}


def build_route_uri(base_url: str, route_name: str, **params: Any) -> str:
    """
    Args:
        base_url: スキームとホストを含むベースURL（例: "http://testserver/"）
        route_name: ROUTESに登録されたルート名
        **params: パスパラメータ。テンプレートに現れないものはクエリ文字列になる

    Raises:
        KeyError: 未登録のルート名、またはパスパラメータが不足している場合
    """
    template = ROUTES[route_name]

    path_values = {}
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if "{" + key + "}" in template:
            path_values[key] = str(value)
        else:
            query[key] = value

    path = template.format(**path_values)
    uri = base_url.rstrip("/") + path
    if query:
        uri += "?" + urlencode(query)
    return uri
