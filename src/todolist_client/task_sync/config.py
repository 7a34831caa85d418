"""Configuration constants for task synchronization functionality."""

import os

# Backend Configuration
DEFAULT_API_BASE_URL = os.environ.get(
    "TODOLIST_API_BASE_URL", "http://localhost:8000/ba-todolist/api"
)
DEFAULT_API_TOKEN = os.environ.get("TODOLIST_API_TOKEN")
DEFAULT_HTTP_TIMEOUT = 10.0  # seconds, applied by the transport only

# Backend Routes
TASKS_PATH = "tasks"
BACKEND_PROBE_PATH = "auth/login"
BACKEND_PROBE_OK_STATUSES = (200, 400)

# Paging (a single bulk window: "fetch everything")
DEFAULT_PAGE_OFFSET = 0
DEFAULT_PAGE_LIMIT = 100
DEFAULT_CALENDAR_LIMIT = 1000

# Store Behaviour
DEFAULT_STRICT_DATE_VIEW = True

# Dashboard Statistics
IN_PROGRESS_PREVIEW_LIMIT = 10
PERSONAL_BUCKET_LABEL = "Personal"
CARD_PALETTE = (
    ("#2196F3", "briefcase"),
    ("#FF9800", "person"),
    ("#E91E63", "book"),
    ("#9C27B0", "list"),
)

# MCP Server Configuration
DEFAULT_MCP_HOST = "localhost"
DEFAULT_MCP_PORT = 3000
DEFAULT_MCP_SERVER_NAME = "todolist-tasks"
