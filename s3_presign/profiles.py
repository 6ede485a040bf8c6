from __future__ import annotations
"""Connection profile models and persistence."""
from dataclasses import dataclass
import json
from pathlib import Path
from typing import Optional

from botocore.credentials import Credentials
import keyring
from keyring.errors import KeyringError

from .addressing import AddressingStyle
from .regions import DEFAULT_REGION_NAME, Region
from .settings import S3Config

SESSION_TOKEN_SUFFIX = ":session_token"


@dataclass
class ConnectionProfile:
    """Represents a saved S3 connection."""

    name: str
    access_key: str
    secret_key: str
    region_name: str = DEFAULT_REGION_NAME
    endpoint_url: Optional[str] = None
    addressing_style: AddressingStyle = AddressingStyle.AUTO
    session_token: Optional[str] = None

    def region(self) -> Region:
        if self.endpoint_url:
            return Region.custom(self.region_name, self.endpoint_url)
        return Region.from_name(self.region_name)

    def credentials(self) -> Credentials:
        return Credentials(self.access_key, self.secret_key, self.session_token)

    def config(self) -> S3Config:
        return S3Config(addressing_style=self.addressing_style)


class KeychainStore:
    """Encapsulates OS keychain access for secrets."""

    def __init__(self, service_name: str = "s3_presign"):
        self._service_name = service_name

    def get_secret(self, profile_name: str) -> str:
        if not profile_name:
            return ""
        try:
            return keyring.get_password(self._service_name, profile_name) or ""
        except KeyringError:
            return ""

    def set_secret(self, profile_name: str, secret_key: str) -> None:
        if not profile_name:
            return
        if not secret_key:
            self.delete_secret(profile_name)
            return
        try:
            keyring.set_password(self._service_name, profile_name, secret_key)
        except KeyringError:
            return

    def delete_secret(self, profile_name: str) -> None:
        if not profile_name:
            return
        try:
            keyring.delete_password(self._service_name, profile_name)
        except KeyringError:
            return


class ProfileStorage:
    """JSON-backed store for connection profiles; secrets live in the keychain."""

    def __init__(self, storage_path: str | Path | None = None, keychain=None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_presign_profiles.json"
        self._path = Path(storage_path)
        self._keychain = keychain if keychain is not None else KeychainStore()

    def load(self) -> list[ConnectionProfile]:
        data = self._read_data()
        profiles: list[ConnectionProfile] = []
        sanitized: list[dict[str, str]] = []
        saw_plaintext = False
        for entry in data:
            try:
                name = entry["name"]
                access_key = entry["access_key"]
            except (KeyError, TypeError):
                continue
            secret_key = entry.get("secret_key", "")
            if secret_key:
                saw_plaintext = True
                self._keychain.set_secret(name, secret_key)
            else:
                secret_key = self._keychain.get_secret(name)
            session_token = entry.get("session_token", "")
            if session_token:
                saw_plaintext = True
                self._keychain.set_secret(_token_entry(name), session_token)
            else:
                session_token = self._keychain.get_secret(_token_entry(name))
            try:
                style = AddressingStyle.parse(entry.get("addressing_style") or "auto")
            except ValueError:
                style = AddressingStyle.AUTO
            profile = ConnectionProfile(
                name=name,
                access_key=access_key,
                secret_key=secret_key,
                region_name=entry.get("region_name") or DEFAULT_REGION_NAME,
                endpoint_url=entry.get("endpoint_url") or None,
                addressing_style=style,
                session_token=session_token or None,
            )
            profiles.append(profile)
            sanitized.append(self._serialize(profile))
        if saw_plaintext:
            self._write_data(sanitized)
        return profiles

    def get(self, name: str) -> Optional[ConnectionProfile]:
        for profile in self.load():
            if profile.name == name:
                return profile
        return None

    def save(self, profiles: list[ConnectionProfile]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = []
        for profile in profiles:
            self._keychain.set_secret(profile.name, profile.secret_key)
            self._keychain.set_secret(_token_entry(profile.name), profile.session_token or "")
            data.append(self._serialize(profile))
        existing_names = {entry.get("name") for entry in self._read_data() if isinstance(entry, dict)}
        current_names = {profile.name for profile in profiles}
        for name in existing_names - current_names:
            if isinstance(name, str) and name:
                self._keychain.delete_secret(name)
                self._keychain.delete_secret(_token_entry(name))
        self._write_data(data)

    @staticmethod
    def _serialize(profile: ConnectionProfile) -> dict[str, str]:
        entry = {
            "name": profile.name,
            "access_key": profile.access_key,
            "region_name": profile.region_name,
            "addressing_style": profile.addressing_style.value,
        }
        if profile.endpoint_url:
            entry["endpoint_url"] = profile.endpoint_url
        return entry

    def _read_data(self) -> list:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return []
        return data if isinstance(data, list) else []

    def _write_data(self, data: list[dict[str, str]]) -> None:
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _token_entry(profile_name: str) -> str:
    return f"{profile_name}{SESSION_TOKEN_SUFFIX}"
