import os

API_BASE_URL = os.getenv("API_BASE_URL", "https://dogerek-server.vercel.app/api")
API_TOKEN = os.getenv("API_TOKEN")

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))
HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", "50"))
ATTENDANCE_WARNING_THRESHOLD = float(os.getenv("ATTENDANCE_WARNING_THRESHOLD", "75"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
