from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import logging
import time

import config
from auth import SessionRegistry
from dependencies import create_backend
from errors import LedgerError
from routers import ALL_ROUTERS

# -----------------------
# Logging
# -----------------------
logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title="DKV Asset Lending API")

app.state.backend = create_backend(config.storage_backend())
app.state.sessions = SessionRegistry(config.accounts())
logger.info("storage backend=%s", app.state.backend.name)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    elapsed_ms = int((time.time() - start) * 1000)
    logger.info(
        "method=%s path=%s status=%s elapsed_ms=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.warning(
        "ledger_error kind=%s path=%s detail=%s",
        type(exc).__name__,
        request.url.path,
        exc,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

for router in ALL_ROUTERS:
    app.include_router(router)

@app.get("/")
def root():
    return {"message": "DKV Asset Lending API", "docs": "/docs", "storage": app.state.backend.name}
