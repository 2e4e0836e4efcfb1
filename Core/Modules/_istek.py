# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import sync_FastAPI, Request, JSONResponse
from time        import time
from user_agents import parse

@sync_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    try:
        ua_header = request.headers.get("User-Agent") or ""
        parsed_ua = parse(ua_header)
        cihaz     = ua_header if str(parsed_ua).split("/")[2].strip() == "Other" else str(parsed_ua)
    except Exception:
        cihaz = request.headers.get("User-Agent")

    fw_for    = request.headers.get("X-Forwarded-For")
    client_ip = fw_for.split(",")[0].strip() if fw_for else (request.client.host if request.client else "-")

    try:
        response = await call_next(request)
        kod      = response.status_code
    except Exception as exc:
        kod      = 500
        response = JSONResponse(status_code=500, content={"ups": "Sunucu Hatası.."})
        konsol.log(f"[red]❌ Beklenmeyen hata:[/] {request.url.path} - {exc}")

    if request.url.path.endswith("/health"):
        return response

    sure = round(time() - baslangic_zamani, 2)
    konsol.log(
        f"[bold blue]»[/] [bold turquoise2]{request.url.path}[/]"
        f"  [bold green]{request.method}[/] [blue]-[/] [bold bright_yellow]{kod}[/]"
        f" [blue]-[/] [bold yellow2]{sure} sn[/]"
        f" [blue]|[/] [bold red]{client_ip}[/] [blue]|[/] [magenta]{cihaz}[/]"
    )

    return response
