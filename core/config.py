import os
from dotenv import load_dotenv

load_dotenv()

# JWT Settings
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-super-secret-key")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))

# Database / cache
DATABASE_URL = os.getenv("DATABASE_URL")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")

# Scoring lexicon override (JSON file), built-in word lists when unset
LEXICON_PATH = os.getenv("LEXICON_PATH")

# Interview settings
DEFAULT_QUESTION_COUNT = int(os.getenv("DEFAULT_QUESTION_COUNT", "5"))
MAX_QUESTION_COUNT = int(os.getenv("MAX_QUESTION_COUNT", "20"))
COMPREHENSIVE_EXPECTED_SECONDS = int(os.getenv("COMPREHENSIVE_EXPECTED_SECONDS", "180"))

# In-memory question generators of unfinished sessions
SESSION_GENERATOR_LIMIT = int(os.getenv("SESSION_GENERATOR_LIMIT", "1000"))
SESSION_GENERATOR_TTL_SECONDS = int(os.getenv("SESSION_GENERATOR_TTL_SECONDS", "14400"))

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]
