"""Run the service with uvicorn: `python -m person_service`."""
import uvicorn

from person_service.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    # log_config=None: logging is configured by the app's lifespan (dictConfig)
    uvicorn.run(
        "person_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
