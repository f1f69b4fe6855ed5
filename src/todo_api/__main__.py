"""
Run the API with uvicorn: `python -m todo_api`.
"""
import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("todo_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
