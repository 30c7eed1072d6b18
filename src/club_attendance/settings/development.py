import os

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
API_TOKEN = os.getenv("API_TOKEN")

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", "20"))
ATTENDANCE_WARNING_THRESHOLD = float(os.getenv("ATTENDANCE_WARNING_THRESHOLD", "75"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
