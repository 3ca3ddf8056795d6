import math

from .base import build_response


def success_response(message: str = None, data=None, **extra):
    return build_response(200, True, message=message, data=data, **extra)


def data_response(data=None, message: str = None):
    return build_response(200, True, message=message, data=data)


def created_response(data=None, message: str = None):
    return build_response(201, True, message=message, data=data)


def paginated_response(data, total: int, page: int, limit: int):
    pagination = {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": math.ceil(total / limit) if limit else 0,
    }
    return build_response(200, True, data=data, pagination=pagination)
