import json
from typing import Any, Dict, Iterable, List, Optional
from xml.etree import ElementTree

from fastapi import Request, Response

from ...port.dto.user_dto import UserDto

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPES = ("application/xml", "text/xml")

# XMLの要素名はPascalCase
_USER_DTO_XML_FIELDS = (
    ("current_game_id", "CurrentGameId"),
    ("full_name", "FullName"),
)


def format_user_dto(dto: UserDto) -> Dict[str, Any]:
    return {
        "currentGameId": str(dto.current_game_id) if dto.current_game_id else None,
        "fullName": dto.full_name,
    }


def format_user_dto_list(dtos: Iterable[UserDto]) -> List[Dict[str, Any]]:
    return [format_user_dto(dto) for dto in dtos]


def _parse_accept(accept: str) -> List[tuple]:
    media_ranges = []
    for position, part in enumerate(accept.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media_type = pieces[0].lower()
        if not media_type:
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        media_ranges.append((media_type, quality, position))
    return media_ranges


def negotiate_media_type(accept: Optional[str]) -> str:
    """
    Acceptヘッダーから応答形式を選ぶ。XMLが明示的に最も好まれる場合のみXMLを返す。
    """
    if not accept:
        return JSON_MEDIA_TYPE

    best_type, best_quality, best_position = JSON_MEDIA_TYPE, 0.0, None
    for media_type, quality, position in _parse_accept(accept):
        if media_type in XML_MEDIA_TYPES + (JSON_MEDIA_TYPE,) and quality > 0:
            if quality > best_quality or (quality == best_quality and best_position is None):
                best_type, best_quality, best_position = media_type, quality, position
    return best_type if best_position is not None else JSON_MEDIA_TYPE


def _xml_element(tag: str, content: Any) -> ElementTree.Element:
    element = ElementTree.Element(tag)
    if isinstance(content, dict):
        for key, value in content.items():
            if value is None:
                continue
            element.append(_xml_element(key, value))
    elif isinstance(content, list):
        for item_tag, item in content:
            element.append(_xml_element(item_tag, item))
    elif content is not None:
        element.text = str(content)
    return element


def to_xml(root_tag: str, content: Any) -> bytes:
    """ルート要素名と内容からXMLドキュメントを生成する"""
    body = ElementTree.tostring(_xml_element(root_tag, content), encoding="unicode")
    return ('<?xml version="1.0" encoding="utf-8"?>' + body).encode("utf-8")


def _user_dto_xml(dto: UserDto) -> Dict[str, Any]:
    return {xml_name: getattr(dto, attr) for attr, xml_name in _USER_DTO_XML_FIELDS}


def render_user(request: Request, dto: UserDto, status_code: int = 200,
                headers: Optional[Dict[str, str]] = None) -> Response:
    if negotiate_media_type(request.headers.get("accept")) in XML_MEDIA_TYPES:
        return Response(to_xml("UserDto", _user_dto_xml(dto)), status_code=status_code,
                        headers=headers, media_type="application/xml")
    return _json_response(format_user_dto(dto), status_code, headers)


def render_user_list(request: Request, dtos: List[UserDto], status_code: int = 200,
                     headers: Optional[Dict[str, str]] = None) -> Response:
    if negotiate_media_type(request.headers.get("accept")) in XML_MEDIA_TYPES:
        items = [("UserDto", _user_dto_xml(dto)) for dto in dtos]
        return Response(to_xml("ArrayOfUserDto", items), status_code=status_code,
                        headers=headers, media_type="application/xml")
    return _json_response(format_user_dto_list(dtos), status_code, headers)


def render_id(request: Request, value: Any, status_code: int = 201,
              headers: Optional[Dict[str, str]] = None) -> Response:
    if negotiate_media_type(request.headers.get("accept")) in XML_MEDIA_TYPES:
        return Response(to_xml("guid", value), status_code=status_code,
                        headers=headers, media_type="application/xml")
    return _json_response(str(value), status_code, headers)


def _json_response(content: Any, status_code: int, headers: Optional[Dict[str, str]]) -> Response:
    return Response(json.dumps(content, ensure_ascii=False), status_code=status_code,
                    headers=headers, media_type=JSON_MEDIA_TYPE)


def _error_xml(content: Dict[str, Any]) -> Dict[str, Any]:
    xml_content: Dict[str, Any] = {}
    for key, value in content.items():
        if key == "errors":
            # フィールド名は要素名にできない場合があるため子要素として持つ
            xml_content[key] = [
                ("error", {"field": field, "message": message})
                for field, messages in value.items()
                for message in messages
            ]
        elif isinstance(value, bool):
            xml_content[key] = str(value).lower()
        elif isinstance(value, (str, int)):
            xml_content[key] = value
    return xml_content


def render_error(request: Optional[Request], content: Dict[str, Any], status_code: int,
                 headers: Optional[Dict[str, str]] = None) -> Response:
    """エラーエンベロープをAcceptヘッダーに従って出力する。XMLでは構造化されたdetailを省く"""
    accept = request.headers.get("accept") if request is not None else None
    if negotiate_media_type(accept) in XML_MEDIA_TYPES:
        return Response(to_xml("ErrorResponse", _error_xml(content)), status_code=status_code,
                        headers=headers, media_type="application/xml")
    return _json_response(content, status_code, headers)
