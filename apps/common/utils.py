"""
Common utility functions for API responses
"""
from rest_framework.response import Response
from rest_framework import status


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": status_code,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST, data=None):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    if data is not None:
        response_data["data"] = data
    return Response(response_data, status=status_code)


def page_payload(items, page, page_size, total):
    """
    Standard pagination block wrapped around an already-serialized page
    """
    total_pages = (total + page_size - 1) // page_size if page_size else 0
    return {
        "list": items,
        "page": {
            "pageNum": page,
            "pageSize": page_size,
            "total": total,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
        }
    }
