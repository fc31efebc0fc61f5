# app/core/pagination.py

MAX_PER_PAGE = 100


def normalize_page(page: int | None, per_page: int | None) -> tuple[int, int | None]:
    """
    페이지 파라미터 정리
    - page: 1 이상 (잘못된 값은 1)
    - per_page: 없거나 잘못되면 제한 없음(None), 100 초과는 100으로
    """
    if page is None or page < 1:
        page = 1

    if per_page is None or per_page < 1:
        per_page = None
    elif per_page > MAX_PER_PAGE:
        per_page = MAX_PER_PAGE

    return page, per_page


def page_offset(page: int, per_page: int | None) -> int:
    if per_page is None:
        return 0
    return (page - 1) * per_page


def build_pagination(total: int, page: int, per_page: int | None) -> dict:
    """{total, per_page, current_page, total_pages} 응답용 정보"""
    if per_page is None:
        # 제한 없이 전부 조회한 경우 한 페이지로 취급
        return {
            "total": total,
            "per_page": total,
            "current_page": page,
            "total_pages": 1 if total > 0 else 0,
        }

    total_pages = (total + per_page - 1) // per_page if total > 0 else 0
    return {
        "total": total,
        "per_page": per_page,
        "current_page": page,
        "total_pages": total_pages,
    }
