import os
from dotenv import load_dotenv

# Loads the .env from the project root
load_dotenv()

ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# Quiz API
QUIZ_API_BASE_URL = os.getenv("QUIZ_API_BASE_URL", "http://localhost:8000").strip().rstrip("/")

# 0 disables the timeout
_timeout_env = os.getenv("QUIZ_API_TIMEOUT_SECONDS", "20").strip()
QUIZ_API_TIMEOUT_SECONDS = float(_timeout_env) if _timeout_env else 0.0

QUIZ_API_TOKEN = os.getenv("QUIZ_API_TOKEN", "").strip()
QUIZ_API_PAGE_LIMIT = int(os.getenv("QUIZ_API_PAGE_LIMIT", "100"))
