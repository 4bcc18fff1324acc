import uvicorn

from formintake.core.config import settings


def main() -> None:
    uvicorn.run("formintake.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
