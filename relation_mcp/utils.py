"""
Utilities and Configuration for the Relation MCP Server
Run with: python -m relation_mcp.utils   (prints the configuration summary)
"""
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from termcolor import colored

from relation_mcp.exceptions import ConfigError

try:
    load_dotenv()
except (FileNotFoundError, PermissionError) as e:
    print(f"Warning: Could not load .env file ({e}). Using environment variables.", file=sys.stderr)

RELATION_DOMAIN = "relationapp.jp"
API_VERSION_PATH = "/api/v2"

SUBDOMAIN_PLACEHOLDER = "<your-subdomain>"
TOKEN_PLACEHOLDER = "<your-token>"

DEFAULT_TIMEOUT = 30.0
ERROR_POLICIES = ("observed", "soft", "raise")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RelationConfig:
    """Connection settings shared read-only by every tool handler."""
    subdomain: str = SUBDOMAIN_PLACEHOLDER
    token: str = TOKEN_PLACEHOLDER
    timeout: Optional[float] = DEFAULT_TIMEOUT
    error_policy: str = "observed"
    log_level: str = "WARNING"

    @property
    def base_url(self) -> str:
        return f"https://{self.subdomain}.{RELATION_DOMAIN}{API_VERSION_PATH}"


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT
    if raw.strip().lower() in ("0", "none", "off"):
        return None  # wait forever
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"RELATION_TIMEOUT must be a number of seconds, got {raw!r}")
    if value < 0:
        raise ConfigError(f"RELATION_TIMEOUT must not be negative, got {raw!r}")
    return value


def load_config(env: Optional[Dict[str, str]] = None) -> RelationConfig:
    """
    Build the configuration from the environment.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        An immutable RelationConfig
    """
    env = os.environ if env is None else env

    policy = env.get('RELATION_ERROR_POLICY', 'observed').strip().lower()
    if policy not in ERROR_POLICIES:
        raise ConfigError(
            f"RELATION_ERROR_POLICY must be one of {', '.join(ERROR_POLICIES)}, got {policy!r}"
        )

    log_level = env.get('RELATION_LOG_LEVEL', 'WARNING').strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"RELATION_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )

    return RelationConfig(
        subdomain=env.get('RELATION_SUBDOMAIN') or SUBDOMAIN_PLACEHOLDER,
        token=env.get('RELATION_API_TOKEN') or TOKEN_PLACEHOLDER,
        timeout=_parse_timeout(env.get('RELATION_TIMEOUT')),
        error_policy=policy,
        log_level=log_level,
    )


def validate_config(config: RelationConfig) -> bool:
    """Validate that all required configuration is present."""
    errors = []

    if config.subdomain == SUBDOMAIN_PLACEHOLDER:
        errors.append("RELATION_SUBDOMAIN is not set")
    elif "." in config.subdomain or "/" in config.subdomain:
        errors.append(
            f"RELATION_SUBDOMAIN should be the tenant name only (e.g. 'mycompany'), got {config.subdomain!r}"
        )

    if config.token == TOKEN_PLACEHOLDER:
        errors.append("RELATION_API_TOKEN is not set")

    if errors:
        raise ConfigError(
            "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    return True


def mask_token(token: str) -> str:
    if token == TOKEN_PLACEHOLDER or len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"


def get_config_summary(config: RelationConfig) -> Dict[str, Any]:
    """Get a summary of current configuration."""
    return {
        "transport": "stdio",
        "base_url": config.base_url,
        "token": mask_token(config.token),
        "timeout": config.timeout,
        "error_policy": config.error_policy,
        "log_level": config.log_level,
    }


def print_config_summary() -> int:
    """Entry point for ``relation-mcp-config``; stdout is left untouched."""
    from relation_mcp import RELATION_TOOLS

    def out(text: str = "") -> None:
        print(text, file=sys.stderr)

    try:
        config = load_config()
    except ConfigError as e:
        out(colored(str(e), "red"))
        return 1

    summary = get_config_summary(config)

    out("=" * 60)
    out(colored("  Relation MCP Configuration", "cyan", attrs=["bold"]))
    out("=" * 60)
    out()
    out("Relation API:")
    out(f"  Base URL: {summary['base_url']}")
    out(f"  Token: {summary['token']}")
    out(f"  Timeout: {summary['timeout'] if summary['timeout'] is not None else 'none'}")
    out()
    out("Server:")
    out(f"  Transport: {summary['transport']}")
    out(f"  Error policy: {summary['error_policy']}")
    out(f"  Log level: {summary['log_level']}")
    out()
    out("MCP Tools:")
    out(f"  Available: {len(RELATION_TOOLS)} tools")
    for spec in RELATION_TOOLS.values():
        out(f"    - {spec.name} ({spec.method} {spec.path})")
    out()

    try:
        validate_config(config)
    except ConfigError as e:
        out(colored(str(e), "yellow"))
        return 1

    out(colored("Configuration is valid!", "green"))
    return 0


if __name__ == "__main__":
    sys.exit(print_config_summary())
