from fastapi import HTTPException, status


class AuthenticationRequired(HTTPException):
    """No resolvable user session for the request."""

    def __init__(self, detail: str = "Not authenticated."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class QueryFailure(HTTPException):
    """A read against the store failed."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class LookupFailure(HTTPException):
    """An existence check failed for a reason other than the row being absent."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class WriteFailure(HTTPException):
    """An insert failed. The detail carries the underlying cause."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
