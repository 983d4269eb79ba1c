import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())

# Model Defaults
DEFAULT_MODEL = os.getenv("DEFAULT_LLM_MODEL", "openai/gpt-4o-mini")

# Provider Configs
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Connection Settings
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))

# Monthly closes requested for the price chart
HISTORY_MONTHS = 6
