import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

DEFAULT_PROVIDER = os.getenv("INFRAGRAPH_DEFAULT_PROVIDER", "aws")
LOG_LEVEL = os.getenv("INFRAGRAPH_LOG_LEVEL", "INFO")

# Optional directory with extra <provider>.yaml schema files
SCHEMA_DIR = os.getenv("INFRAGRAPH_SCHEMA_DIR", "")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("INFRAGRAPH_CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
