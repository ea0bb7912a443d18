# backend/planner/config.py
"""
Runtime settings for the study planner, read from environment variables.

Every value has a development default so the app can be imported without any
environment set up. Change SECRET_KEY for anything that is not local.
"""

import os

DATABASE_URL = os.getenv("PLANNER_DATABASE_URL", "sqlite:///./planner.db")

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME_TO_A_SECURE_RANDOM_KEY")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
TOKEN_ISSUER = os.getenv("TOKEN_ISSUER", "study-planner")
TOKEN_AUDIENCE = os.getenv("TOKEN_AUDIENCE", "study-planner-users")

# How far in the past a new task's deadline may lie
DEADLINE_TOLERANCE_MINUTES = int(os.getenv("DEADLINE_TOLERANCE_MINUTES", "5"))

# comma separated; "*" allows everything
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", ".local/planner")
