"""
Application entrypoint.

`uvicorn app.main:app` serves the intake API with configuration from the
environment.
"""

from app.api.main import create_app
from app.config import get_config
from app.utils.logger import get_logger, setup_logging

config = get_config()
setup_logging(config)
logger = get_logger(__name__)

app = create_app(config)
