import logging
import sys

from .app import create_app
from .common.config import settings
from .common.sheets_client import MissingCredentialsError

try:
    app = create_app()
except MissingCredentialsError as e:
    logging.basicConfig(level=logging.ERROR)
    logging.getLogger(__name__).error("%s (GOOGLE_SHEETS_CLIENT_EMAIL / GOOGLE_SHEETS_PRIVATE_KEY)", e)
    sys.exit(1)

if __name__ == "__main__":
    app.run(host=settings.APP_HOST, port=settings.APP_PORT)
