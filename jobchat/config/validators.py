"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check a raw configuration dict for settings that are valid but suspicious.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    server = config_dict.get("server", {})
    if isinstance(server, dict):
        origins = server.get("allowed_origins", [])
        if isinstance(origins, list) and "*" in origins:
            warning_messages.append(
                "allowed_origins contains '*'; any website will be able to call the chat API"
            )

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        slack = matching.get("rate_slack")
        if isinstance(slack, (int, float)) and slack > 0.5:
            warning_messages.append(
                f"rate_slack of {slack} relaxes minimum rates by more than half"
            )
        if matching.get("neighbor_expansion") is False:
            warning_messages.append("Neighbor-state expansion is disabled")

    llm = config_dict.get("llm", {})
    if isinstance(llm, dict):
        temperature = llm.get("temperature")
        if isinstance(temperature, (int, float)) and temperature > 1.0:
            warning_messages.append(
                f"High llm.temperature ({temperature}) makes replies less grounded"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
