# Root conftest.py - MUST be at project root to load .env before test collection
# This file is loaded by pytest before any test modules are imported.

# Load environment variables FIRST, before any other imports
# This ensures LOGICFLOW_SETTINGS is visible when settings are resolved
# during collection.
from dotenv import load_dotenv
load_dotenv()
