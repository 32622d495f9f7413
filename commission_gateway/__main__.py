"""Run the gateway with uvicorn: python -m commission_gateway"""

import uvicorn

from commission_gateway.config import settings


def main() -> None:
    uvicorn.run(
        "commission_gateway.api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the JSON logging set up by the app
    )


if __name__ == "__main__":
    main()
