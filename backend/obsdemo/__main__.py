"""Run the demo with uvicorn: `python -m obsdemo`."""

import uvicorn

from obsdemo.config import settings


def main() -> None:
    uvicorn.run(
        "obsdemo.main:app",
        host=settings.host,
        port=settings.port,
        # Request lines come from the instrumentation middleware
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
