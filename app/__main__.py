"""
Run the API server:

  python -m app

Reads PORT (default 8080) and the rest of the configuration from the environment or .env.
"""

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from app.core.config import get_settings
from app.main import create_app


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
