from decimal import Decimal
import os
import logging

# -----------------------------
# Configuration & Logging
# -----------------------------
DATABASE_URL = os.getenv("ELIB_DB", "sqlite:///./elibrary.db")
LOG_LEVEL = os.getenv("ELIB_LOG", "INFO")
LOAN_DAYS = int(os.getenv("ELIB_LOAN_DAYS", "14"))
DAILY_RATE = Decimal(os.getenv("ELIB_DAILY_RATE", "0.50"))

logging.basicConfig(level=LOG_LEVEL,
                    format="%(asctime)s %(levelname)s %(name)s - %(message)s")
logger = logging.getLogger("lending_library")
