# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                  import sync_FastAPI, Request, JSONResponse
from starlette.exceptions  import HTTPException as StarletteHTTPException
from pydantic              import ValidationError
from Public.WebSocket.Libs import RoomNotFound

@sync_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@sync_FastAPI.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    errors   = exc.errors()
    messages = [f"{e['loc'][0]}: {e['msg']}" for e in errors]

    return JSONResponse(
        status_code = 422,
        content     = {"success": False, "message": " | ".join(messages)}
    )

@sync_FastAPI.exception_handler(RoomNotFound)
async def room_not_found_handler(request: Request, exc: RoomNotFound):
    return JSONResponse(
        status_code = 404,
        content     = {"success": False, "message": str(exc), "code": exc.code}
    )
