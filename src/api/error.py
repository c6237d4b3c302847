from fastapi import status

from libs.result import Error


class ClientError(Exception):
    """Rendered as-is with the given 4xx status"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    """Rendered with a generic message; the reason is only logged"""

    def __init__(
        self, base_error: Error, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)
