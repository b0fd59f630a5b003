import httpx
import uvicorn
from fastapi import FastAPI

from provider_gateway import __version__
from provider_gateway.api.endpoints import router as api_router
from provider_gateway.api.services.error_handling import (
    gateway_exception_handler,
    upstream_exception_handler,
)
from provider_gateway.core.config.config import get_config
from provider_gateway.core.exceptions import ProviderGatewayError
from provider_gateway.core.logging import configure_root_logging

app = FastAPI(title="Provider Gateway", version=__version__)

app.include_router(api_router)
app.add_exception_handler(ProviderGatewayError, gateway_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(httpx.HTTPError, upstream_exception_handler)


def main() -> None:
    cfg = get_config()
    configure_root_logging(cfg.log_level)

    log_level = cfg.log_level.lower()
    uvicorn.run(
        "provider_gateway.main:app",
        host=cfg.host,
        port=cfg.port,
        log_level=log_level if log_level in ("debug", "info", "warning", "error", "critical") else "info",
        access_log=log_level == "debug",
        reload=False,
    )


if __name__ == "__main__":
    main()
