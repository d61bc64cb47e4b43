import uvicorn

from textextract.config import settings


def main():
    uvicorn.run(
        "textextract.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
