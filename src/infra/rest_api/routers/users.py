from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from typing import Any, List, Optional
from uuid import UUID

from ..dependencies import get_user_service_dependency
from ..links import build_route_uri
from ..schemas import UserCreateRequest, UserUpdateRequest, UserResponse, PaginationMetadata
from ...presentators.format_api_output import render_id, render_user, render_user_list
from ....domain.exception.user_exceptions import InvalidUserRequestError, UserNotFoundError
from ....usecase.user_management.json_patch import parse_patch_document
from ....usecase.user_management.user_service import UserService

router = APIRouter(
    prefix="/api/users",
    tags=["users"]
)

PAGINATION_HEADER = "X-Pagination"


def parse_user_id(raw: Optional[str]) -> Optional[UUID]:
    """ルート値をUUIDに変換する。不正な値はNoneとして扱う"""
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


def _created_at_route(request: Request, user_id: UUID) -> Response:
    location = build_route_uri(str(request.base_url), "get_user_by_id", userId=user_id)
    return render_id(request, user_id, status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.api_route("/{user_id}", methods=["GET", "HEAD"], name="get_user_by_id", response_model=UserResponse)
async def get_user_by_id(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service_dependency)
):
    """
    IDでユーザーを取得する
    """
    dto = await service.get_user_by_id(parse_user_id(user_id))
    return render_user(request, dto)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UUID)
async def create_user(
    request: Request,
    req: Optional[UserCreateRequest] = Body(None),
    service: UserService = Depends(get_user_service_dependency)
):
    """
    新規ユーザー作成
    """
    user_id = await service.create_user(req.to_dto() if req is not None else None)
    return _created_at_route(request, user_id)


@router.put("")
async def update_user_without_id():
    """ルートにIDがないPUTは不正なリクエスト"""
    raise InvalidUserRequestError("User id is required")


@router.put("/{user_id}", responses={204: {"description": "Updated"}, 201: {"description": "Created"}})
async def update_user(
    user_id: str,
    request: Request,
    req: Optional[UserUpdateRequest] = Body(None),
    service: UserService = Depends(get_user_service_dependency)
):
    """
    ユーザーを全置換する。存在しないIDの場合はそのIDで作成する
    """
    result = await service.update_user(parse_user_id(user_id), req.to_dto() if req is not None else None)
    if not result.created:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return _created_at_route(request, result.user_id)


@router.patch("")
async def partially_update_user_without_id(patch_document: Any = Body(None)):
    """ルートにIDがないPATCH"""
    parse_patch_document(patch_document)
    raise UserNotFoundError("User id is required")


@router.patch("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def partially_update_user(
    user_id: str,
    patch_document: Any = Body(None),
    service: UserService = Depends(get_user_service_dependency)
):
    """
    JSON Patchドキュメントでユーザーを部分更新する
    """
    await service.partially_update_user(parse_user_id(user_id), patch_document)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("")
async def delete_user_without_id():
    raise UserNotFoundError("User id is required")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service_dependency)
):
    """
    ユーザーを削除する
    """
    await service.delete_user(parse_user_id(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", name="get_users", response_model=List[UserResponse])
async def get_users(
    request: Request,
    page_number: int = Query(default=1, alias="pageNumber"),
    page_size: Optional[int] = Query(default=None, alias="pageSize"),
    service: UserService = Depends(get_user_service_dependency)
):
    """
    ユーザー一覧を取得する（ページネーション対応）

    ページング情報はX-Paginationヘッダーで返す。
    """
    page = await service.get_users(page_number, page_size)

    base_url = str(request.base_url)
    previous_link = None
    next_link = None
    if page.has_previous:
        previous_link = build_route_uri(base_url, "get_users",
                                        pageNumber=page.current_page - 1, pageSize=page.page_size)
    if page.has_next:
        next_link = build_route_uri(base_url, "get_users",
                                    pageNumber=page.current_page + 1, pageSize=page.page_size)

    metadata = PaginationMetadata(
        previous_page_link=previous_link,
        next_page_link=next_link,
        total_count=page.total_count,
        page_size=page.page_size,
        current_page=page.current_page,
        total_pages=page.total_pages,
    )
    return render_user_list(request, page.items, headers={PAGINATION_HEADER: metadata.to_header()})


@router.options("")
async def get_users_options():
    """利用可能なメソッドを返す"""
    return Response(status_code=status.HTTP_200_OK, headers={"Allow": "POST, GET, OPTIONS"})
