from fastapi import HTTPException

from ..errors import PcforgeError


def http_error(exc: PcforgeError) -> HTTPException:
    """Map a domain error onto the HTTP status it declares."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)
