"""
Startup validation utilities to check configuration before serving requests.

Validates the governance gateway and identity provider settings.
"""

import os
import sys
from typing import List
from urllib.parse import urlparse

from src.utils.logger import logger


class StartupValidator:
    """Startup validation for the DAO cooperative backend."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if all critical checks pass, False otherwise.
        """
        logger.info("StartupValidator: Beginning configuration validation")

        # Critical validations (must pass)
        self._validate_environment_variables()
        self._validate_gateway_config()

        # Non-critical validations (warnings only)
        self._validate_identity_config()
        self._validate_optional_config()

        self._report_results()

        return len(self.errors) == 0

    def _validate_environment_variables(self) -> None:
        """Validate required environment variables."""
        required_vars = ["GOVERNANCE_GATEWAY_URL"]

        missing_vars = [var for var in required_vars if not os.environ.get(var)]
        if missing_vars:
            self.errors.append(f"Missing required environment variables: {', '.join(missing_vars)}")
        else:
            logger.info("StartupValidator: Environment variables validation passed")

    def _validate_gateway_config(self) -> None:
        """Validate gateway URL and timeout."""
        url = os.environ.get("GOVERNANCE_GATEWAY_URL")
        if url and not _is_http_url(url):
            self.errors.append(f"GOVERNANCE_GATEWAY_URL is not an http(s) URL: {url}")

        timeout = os.environ.get("GOVERNANCE_GATEWAY_TIMEOUT")
        if timeout:
            try:
                if float(timeout) <= 0:
                    self.errors.append("GOVERNANCE_GATEWAY_TIMEOUT must be positive")
            except ValueError:
                self.errors.append(f"GOVERNANCE_GATEWAY_TIMEOUT is not a number: {timeout}")

    def _validate_identity_config(self) -> None:
        """Validate identity provider configuration."""
        rpc_url = os.environ.get("ETH_RPC_URL")
        if rpc_url:
            if not _is_http_url(rpc_url):
                self.warnings.append(f"ETH_RPC_URL is not an http(s) URL: {rpc_url}")
        elif not os.environ.get("DEFAULT_ACCOUNT"):
            self.warnings.append(
                "Neither ETH_RPC_URL nor DEFAULT_ACCOUNT set: no account will be selected"
            )

    def _validate_optional_config(self) -> None:
        """Validate optional configuration with warnings."""
        optional_configs = {
            "ALLOWED_ORIGINS": "CORS configuration (defaults to *)",
            "GOVERNANCE_GATEWAY_TIMEOUT": "Gateway timeout (defaults to 30s)",
        }

        for var, description in optional_configs.items():
            if not os.environ.get(var):
                self.warnings.append(f"Optional config {var} not set: {description}")

    def _report_results(self) -> None:
        """Report validation results."""
        if self.errors:
            logger.error("StartupValidator: %d critical errors found:", len(self.errors))
            for error in self.errors:
                logger.error("  - %s", error)

        if self.warnings:
            logger.warning("StartupValidator: %d warnings found:", len(self.warnings))
            for warning in self.warnings:
                logger.warning("  - %s", warning)

        if not self.errors and not self.warnings:
            logger.info("StartupValidator: All validation checks passed successfully")
        elif not self.errors:
            logger.info("StartupValidator: Critical validation passed with %d warnings", len(self.warnings))


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_startup() -> bool:
    """
    Run startup validation and return success status.

    Returns:
        True if validation passes, False if critical errors found.
    """
    validator = StartupValidator()
    return validator.validate_all()


def validate_or_exit() -> None:
    """Run startup validation and exit if critical errors are found."""
    if not validate_startup():
        logger.error("StartupValidator: Critical validation errors found. Exiting.")
        sys.exit(1)

    logger.info("StartupValidator: System validation completed successfully")


if __name__ == "__main__":
    # Allow running validation as a standalone script
    validate_or_exit()
