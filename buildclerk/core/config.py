"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    BUILDCLERK_SERVER_URL — Default backend base URL, used when a build hook omits server_url
    JENKINS_URL           — Base URL of the CI server's web UI (prefix for per-build paths)
    LOG_LEVEL             — Root log level (default: INFO)
    LOG_DIR               — Directory for the daily log file (default: logs)

Backend URL:
    The backend base URL is normally supplied by the caller with each
    notification. BUILDCLERK_SERVER_URL is only a fallback for hook calls
    that do not carry one; it is read, never written.
"""
import os
from dotenv import load_dotenv

load_dotenv()

BUILDCLERK_SERVER_URL = os.getenv("BUILDCLERK_SERVER_URL")
JENKINS_URL = os.getenv("JENKINS_URL")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")
