"""Actionable error catalog for lavalinkctl."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "config_source_invalid": {
        "what": "Invalid environment file {path} (line {line}): {reason}",
        "next": "Use `KEY=value` lines; quote values containing spaces or `#`.",
    },
    "config_source_unreadable": {
        "what": "Could not read environment file {path}: {reason}",
        "next": "Check the file permissions or remove the file.",
    },
    "runtime_not_found": {
        "what": "Container runtime `{runtime}` was not found on PATH.",
        "next": "Install podman or docker, or set CONTAINER_RUNTIME to an installed runtime.",
    },
    "exec_failed": {
        "what": "Could not execute `{runtime}`: {reason}",
        "next": "Check that the runtime binary is executable by the current user.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
