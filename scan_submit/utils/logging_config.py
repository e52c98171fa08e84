import logging
import os
from datetime import datetime
from scan_submit.config.settings import PathConfig

def setup_logging(log_dir=None):
    """Configure logging for the application."""
    log_dir = log_dir or PathConfig.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(
        log_dir,
        f'scan_submit_{datetime.now().strftime("%Y%m%d")}.log'
    )
    level_name = os.getenv("SCAN_SUBMIT_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    return logging.getLogger(__name__)
