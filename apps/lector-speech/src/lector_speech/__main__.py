"""Entry point for lector-speech service."""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "lector_speech.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
