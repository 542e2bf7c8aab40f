import logging

import uvicorn

from fresh_laundry.core.config import Settings


def main():
    settings = Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger(__name__).info("Fresh Laundry Server running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run("fresh_laundry.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
