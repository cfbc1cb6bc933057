from __future__ import annotations

from pathlib import Path


class SiteError(Exception):
    """Base class for every failure that should stop a build with a message."""


class ConfigError(SiteError):
    pass


class BuildIOError(SiteError):
    def __init__(self, action: str, path: Path | str, reason: object) -> None:
        self.action = action
        self.path = Path(path)
        self.reason = reason
        super().__init__(f'Can\'t {action} "{path}": {reason}')


class CommonTemplateError(BuildIOError):
    pass
