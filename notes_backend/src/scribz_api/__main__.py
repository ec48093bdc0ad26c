import uvicorn

from scribz_api.config import get_settings


# PUBLIC_INTERFACE
def main():
    """Serve the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "scribz_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENV == "dev",
    )


if __name__ == "__main__":
    main()
