import os

from dotenv import load_dotenv

from src.utils.logger import logger

load_dotenv()  # Load environment variables from .env file


def get_required_env(env_name: str) -> str:
    value = os.environ.get(env_name)

    if not value:
        raise ValueError(f"{env_name} environment variable is required.")
    return value


def _float_env(env_name: str, default: float) -> float:
    raw = os.environ.get(env_name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        # Startup validation reports the bad value
        logger.warning(f"{env_name}={raw!r} is not a number, using {default}")
        return default


# --------------------------------------------------
# Governance Gateway Configuration
# --------------------------------------------------
# Base URL of the relay that forwards calls to the DAO cooperative contract
GOVERNANCE_GATEWAY_URL = os.environ.get("GOVERNANCE_GATEWAY_URL")
GOVERNANCE_GATEWAY_TIMEOUT = _float_env("GOVERNANCE_GATEWAY_TIMEOUT", 30.0)
GOVERNANCE_GATEWAY_TOKEN = os.environ.get("GOVERNANCE_GATEWAY_TOKEN")

# --------------------------------------------------
# Identity Provider Configuration
# --------------------------------------------------
# When ETH_RPC_URL is unset, accounts come from DEFAULT_ACCOUNT instead of a node
ETH_RPC_URL = os.environ.get("ETH_RPC_URL")
ACCOUNTS_POLL_INTERVAL = _float_env("ACCOUNTS_POLL_INTERVAL", 2.0)
DEFAULT_ACCOUNT = os.environ.get("DEFAULT_ACCOUNT")

# --------------------------------------------------
# API Configuration
# --------------------------------------------------
ALLOWED_ORIGINS = os.environ.get("ALLOWED_ORIGINS", "*")
