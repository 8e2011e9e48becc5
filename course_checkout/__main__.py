import uvicorn

from course_checkout.config import Settings, setup_logging
from course_checkout.main import create_app


def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
