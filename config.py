"""
Configuration - environment-driven settings for the schedule generator
"""
import os
from pathlib import Path

# Search budget: total recursive expansions allowed per generation call
MAX_SCHEDULE_COMBINATIONS = int(os.environ.get("MAX_SCHEDULE_COMBINATIONS", "1000"))
DEFAULT_MAX_SCHEDULE_OPTIONS = int(os.environ.get("DEFAULT_MAX_SCHEDULE_OPTIONS", "5"))
MAX_POOL_SIZE = int(os.environ.get("MAX_POOL_SIZE", "8"))

# Course catalog source
CATALOG_API_URL = os.environ.get("CATALOG_API_URL", "")
CATALOG_API_KEY = os.environ.get("CATALOG_API_KEY", "")
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "10"))

CACHE_DIR = Path(os.environ.get("CACHE_DIR", Path(__file__).resolve().parent / "cache"))
