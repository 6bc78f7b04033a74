from fastapi import HTTPException, status


class NotFound(HTTPException):
    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found: {key}",
        )


class AccessDenied(HTTPException):
    def __init__(self, user_id, dashboard_id, required_level=None, detail: str | None = None):
        self.user_id = user_id
        self.dashboard_id = dashboard_id
        self.required_level = required_level
        if detail is None:
            if required_level is None:
                detail = f"User {user_id} is not authorized for this operation"
            else:
                detail = (
                    f"User {user_id} requires {required_level} access "
                    f"on dashboard {dashboard_id}"
                )
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AlreadyExists(HTTPException):
    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{entity} already exists: {key}",
        )


class Expired(HTTPException):
    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(
            status_code=status.HTTP_410_GONE,
            detail=f"{entity} is expired: {key}",
        )


class InvalidArgument(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
