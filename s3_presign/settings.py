from __future__ import annotations
"""Client configuration values and settings persistence helpers."""

from dataclasses import dataclass
from datetime import timedelta
import json
import os
from pathlib import Path
from typing import Mapping, Union

from botocore.config import Config

from .addressing import AddressingStyle
from .regions import DEFAULT_REGION_NAME, KNOWN_REGIONS, Region

DEFAULT_EXPIRES_IN = timedelta(seconds=3600)
ADDRESSING_STYLE_ENV = "S3_ADDRESSING_STYLE"


@dataclass(frozen=True)
class S3Config:
    """Client-wide S3 options."""

    addressing_style: AddressingStyle = AddressingStyle.AUTO

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> S3Config:
        """Read ``S3_ADDRESSING_STYLE``; unset means ``AUTO``.

        Raises:
            ValueError: when the variable holds an unknown style.
        """

        env = os.environ if environ is None else environ
        value = env.get(ADDRESSING_STYLE_ENV)
        if not value:
            return cls()
        return cls(addressing_style=AddressingStyle.parse(value))

    def botocore_config(self) -> Config:
        return Config(
            signature_version="s3v4",
            s3={"addressing_style": self.addressing_style.value},
        )


@dataclass(frozen=True)
class PreSignedRequestOption:
    """Per-call options for pre-signed URL generation."""

    expires_in: timedelta = DEFAULT_EXPIRES_IN
    addressing_style: AddressingStyle = AddressingStyle.AUTO

    def __post_init__(self):
        if not isinstance(self.expires_in, timedelta):
            object.__setattr__(self, "expires_in", timedelta(seconds=self.expires_in))
        if self.expires_in <= timedelta(0):
            raise ValueError("expires_in must be greater than zero")

    @classmethod
    def from_config(
        cls,
        config: S3Config,
        expires_in: Union[timedelta, int, None] = None,
    ) -> PreSignedRequestOption:
        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN
        return cls(expires_in=expires_in, addressing_style=config.addressing_style)


@dataclass
class PresignSettings:
    """Simple container for persistent presigning defaults."""

    addressing_style: str = AddressingStyle.AUTO.value
    expires_in_seconds: int = int(DEFAULT_EXPIRES_IN.total_seconds())
    region_name: str = DEFAULT_REGION_NAME

    def to_config(self) -> S3Config:
        return S3Config(addressing_style=AddressingStyle.parse(self.addressing_style))

    def to_option(self) -> PreSignedRequestOption:
        return PreSignedRequestOption.from_config(
            self.to_config(), expires_in=self.expires_in_seconds
        )

    def region(self) -> Region:
        return Region.from_name(self.region_name)


class SettingsStorage:
    """JSON-backed persistence for :class:`PresignSettings`."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_presign_settings.json"
        self._path = Path(storage_path)

    def load(self) -> PresignSettings:
        if not self._path.exists():
            return PresignSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return PresignSettings()
        if not isinstance(data, dict):
            return PresignSettings()

        style = data.get("addressing_style", PresignSettings.addressing_style)
        try:
            style_value = AddressingStyle.parse(style).value
        except (AttributeError, ValueError):
            style_value = PresignSettings.addressing_style

        expires = data.get("expires_in_seconds", PresignSettings.expires_in_seconds)
        try:
            expires_value = int(expires)
        except (TypeError, ValueError):
            expires_value = PresignSettings.expires_in_seconds
        if expires_value <= 0:
            expires_value = PresignSettings.expires_in_seconds

        region_name = data.get("region_name", PresignSettings.region_name)
        if not isinstance(region_name, str) or region_name not in KNOWN_REGIONS:
            region_name = PresignSettings.region_name

        return PresignSettings(
            addressing_style=style_value,
            expires_in_seconds=expires_value,
            region_name=region_name,
        )

    def save(self, settings: PresignSettings) -> None:
        payload = {
            "addressing_style": settings.addressing_style,
            "expires_in_seconds": max(int(settings.expires_in_seconds), 1),
            "region_name": settings.region_name,
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            # Persist best-effort; ignore filesystem issues.
            return
