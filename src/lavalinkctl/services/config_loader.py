"""Environment configuration loader for lavalinkctl."""

import logging
import os
import re
import shlex
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from lavalinkctl.errors import ConfigSourceError
from lavalinkctl.errors_catalog import actionable_error
from lavalinkctl.models import (
    DEFAULT_CONTAINER_IMAGE,
    DEFAULT_CONTAINER_NAME,
    DEFAULT_SERVER_ADDRESS,
    DEFAULT_SERVER_PASSWORD,
    DEFAULT_SERVER_PORT,
    ResolvedConfig,
)

_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# ResolvedConfig field -> (variable, default)
CONFIG_KEYS = {
    "container_name": ("LAVALINK_CONTAINER_NAME", DEFAULT_CONTAINER_NAME),
    "container_image": ("LAVALINK_CONTAINER_IMAGE", DEFAULT_CONTAINER_IMAGE),
    "interactive_mode": ("LAVALINK_INTERACTIVE", None),
    "server_port": ("LAVALINK_PORT", DEFAULT_SERVER_PORT),
    "server_address": ("LAVALINK_ADDRESS", DEFAULT_SERVER_ADDRESS),
    "server_password": ("LAVALINK_SERVER_PASSWORD", DEFAULT_SERVER_PASSWORD),
    "container_runtime_override": ("CONTAINER_RUNTIME", None),
}


def _strip_comment(raw_value: str) -> str:
    """Drop a trailing comment the way a shell would.

    ``#`` only starts a comment when it is unquoted and follows whitespace,
    so ``KEY=#abc`` and ``KEY=abc#123`` keep the ``#``.
    """
    quote = None
    escaped = False
    after_blank = False
    for index, char in enumerate(raw_value):
        word_start = after_blank
        after_blank = False
        if escaped:
            escaped = False
        elif quote == "'":
            if char == "'":
                quote = None
        elif char == "\\":
            escaped = True
        elif quote == '"':
            if char == '"':
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char.isspace():
            after_blank = True
        elif char == "#" and word_start:
            return raw_value[:index]
    return raw_value


class EnvFileParser:
    """Parses ``KEY=value`` environment files without evaluating them."""

    def parse(self, path: Path) -> Dict[str, str]:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigSourceError(
                actionable_error("config_source_unreadable", path=str(path), reason=str(exc))
            ) from exc

        values: Dict[str, str] = {}
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export "):].lstrip()

            key, sep, raw_value = line.partition("=")
            key = key.strip()
            if not sep:
                self._fail(path, line_number, "expected KEY=value")
            if not _KEY_PATTERN.match(key):
                self._fail(path, line_number, f"invalid variable name '{key}'")

            values[key] = self._parse_value(path, line_number, raw_value)
        return values

    def _parse_value(self, path: Path, line_number: int, raw_value: str) -> str:
        try:
            return " ".join(shlex.split(_strip_comment(raw_value), posix=True))
        except ValueError as exc:
            self._fail(path, line_number, str(exc))

    def _fail(self, path: Path, line_number: int, reason: str):
        raise ConfigSourceError(
            actionable_error(
                "config_source_invalid",
                path=str(path),
                line=str(line_number),
                reason=reason,
            )
        )


def resolve_config(sources: Sequence[Mapping[str, str]], project_root: str) -> ResolvedConfig:
    """Layer ``sources`` in increasing precedence and apply defaults.

    A key missing from a later source leaves the earlier value in place. An
    empty value counts as unset, like ``${VAR:-default}``.
    """
    merged: Dict[str, str] = {}
    for source in sources:
        merged.update(source)

    values: Dict[str, Optional[str]] = {}
    for field_name, (variable, default) in CONFIG_KEYS.items():
        values[field_name] = merged.get(variable) or default

    return ResolvedConfig(project_root=project_root, **values)


class ConfigLoader:
    """Loads the base and local env files and the process environment."""

    ENV_FILES = (".env", ".env.local")

    def __init__(
        self,
        project_root: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
        parser: Optional[EnvFileParser] = None,
    ):
        self.project_root = os.path.abspath(project_root or os.getcwd())
        self.environ = dict(os.environ if environ is None else environ)
        self.logger = logger or logging.getLogger("lavalinkctl")
        self.parser = parser or EnvFileParser()

    def load_sources(self) -> List[Dict[str, str]]:
        sources: List[Dict[str, str]] = []
        for file_name in self.ENV_FILES:
            path = Path(self.project_root) / file_name
            if not path.is_file():
                self.logger.debug("Environment file not present, skipping: %s", path)
                continue
            values = self.parser.parse(path)
            self.logger.debug("Loaded %s variable(s) from %s", len(values), path)
            sources.append(values)

        sources.append(self.environ)
        return sources

    def resolve(self) -> ResolvedConfig:
        config = resolve_config(self.load_sources(), self.project_root)
        self.logger.debug(
            "Resolved sidecar config: name=%s image=%s port=%s address=%s interactive=%s",
            config.container_name,
            config.container_image,
            config.server_port,
            config.server_address,
            config.interactive_mode,
        )
        return config
