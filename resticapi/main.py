import shutil
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from resticapi.core.errors import ConfigError
from resticapi.core.helpers import error_response
from resticapi.core.session import RepositorySession
from resticapi.models.schemas import AppConfig
from resticapi.routers import repository, restore
from resticapi.services.restic import ResticService
from resticapi.utils.config_store import load_config
from resticapi.utils.logger import get_logger

# ─── CONFIG ───────────────────────────────────────────────
logger = get_logger("Server")


def create_app(config: AppConfig, service: Optional[ResticService] = None) -> FastAPI:
    app = FastAPI(title="ResticAPI")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.session = RepositorySession(config.repository)
    app.state.restic = service or ResticService.from_config(config.restic)

    app.include_router(repository.router)
    app.include_router(restore.router)

    @app.exception_handler(RequestValidationError)
    async def on_invalid_body(_request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return error_response(f"Invalid request body: {details}", 400)

    @app.on_event("startup")
    async def on_startup():
        binary = app.state.restic.binary
        resolved = shutil.which(binary)
        if resolved:
            logger.info(f"Using restic binary {resolved} for repository {config.repository.location}")
        else:
            logger.warning(f"restic binary '{binary}' not found on PATH; every operation will fail")

    return app


# ─── MAIN ─────────────────────────────────────────────────

def main() -> int:
    try:
        config = load_config()
    except ConfigError as e:
        logger.error(e.message)
        print(e.message, file=sys.stderr)
        return 1

    app = create_app(config)
    logger.info(f"ResticAPI listening on http://{config.server.ip}:{config.server.port}")
    uvicorn.run(app, host=config.server.ip, port=config.server.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
