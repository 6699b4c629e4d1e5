from typing import Any, Dict
from aiohttp import web

from ..logging import BaseLogger


class APIError(Exception):
    """Error a handler raises to answer with a JSON error body."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"api error: code={code}, message={message}")

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


def create_error_middleware(logger: BaseLogger):
    """Create a middleware rendering handler errors as JSON.

    APIError keeps its own status code, aiohttp HTTP exceptions pass
    through untouched and anything else becomes a 500.
    """

    @web.middleware
    async def error_middleware(request: web.Request, handler):
        try:
            return await handler(request)
        except APIError as e:
            return web.json_response(e.to_dict(), status=e.code)
        except web.HTTPException:
            raise
        except Exception as e:
            logger.log_error(f"Unhandled error serving {request.method} {request.path}: {str(e)}")
            error = APIError(500, "internal server error")
            return web.json_response(error.to_dict(), status=error.code)

    return error_middleware
