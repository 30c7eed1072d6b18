API_BASE_URL = "http://testserver/api"
API_TOKEN = "test-token"

REQUEST_TIMEOUT = 1.0
HISTORY_PAGE_SIZE = 20
ATTENDANCE_WARNING_THRESHOLD = 75.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
