from dataclasses import dataclass, field
from math import ceil
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass
class PageList(Generic[T]):
    """
    ページ単位のエンティティ一覧

    全体の件数とページ内の位置を表すメタデータを持つ。永続化はしない。
    """
    items: List[T] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 10
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
