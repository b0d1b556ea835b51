import sys
import logging
from .services.runner import run_service

if __name__ == "__main__":
    try:
        run_service()
    except KeyboardInterrupt:
        logging.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
