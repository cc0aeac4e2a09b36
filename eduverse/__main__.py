"""
Run the EduVerse Backend with uvicorn
"""

import uvicorn

from eduverse.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "eduverse.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None
    )


if __name__ == "__main__":
    main()
