"""
Main entrypoint: FastAPI server with the report scheduler running in the background.

The scheduler starts in the app lifespan (SCHEDULER_ENABLED, default true) and
stops when uvicorn shuts down. The Octav API is probed once at startup so a
bad key is reported before the first scheduled job.

Env: OCTAV_API_KEY, WALLET_ADDRESSES, PORT (default 3000), API_HOST, LOG_LEVEL, etc.

API only: SCHEDULER_ENABLED=false uvicorn backend_txreport.api_server.app:app --port 3000
"""

import os
import sys

# Configure structured logging before other imports that may log
from backend_txreport.txreport_logging import get_logger

logger = get_logger("main")


def main() -> None:
    from backend_txreport.api_server.server import get_services
    from backend_txreport.core.exceptions import ConfigError, OctavApiError

    services = get_services()
    settings = services.settings
    if not settings.wallet_addresses:
        logger.warning("main_no_wallets", message="WALLET_ADDRESSES is empty; scheduled reports will fail")
    try:
        status = services.client.get_status()
        logger.info("main_octav_connected", status=status)
    except ConfigError as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)
    except OctavApiError as e:
        logger.error("main_octav_unreachable", error=str(e), status=e.status_code)
        sys.exit(1)

    from backend_txreport.api_server.app import app
    import uvicorn

    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    logger.info("main_server_starting", host=api_host, port=settings.api_port)
    uvicorn.run(app, host=api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
