from __future__ import annotations
"""AWS regions and custom endpoints."""
from dataclasses import dataclass
import os
from typing import Mapping, Optional

DEFAULT_REGION_NAME = "us-east-1"

KNOWN_REGIONS = (
    "ap-east-1",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    "ap-south-1",
    "ap-southeast-1",
    "ap-southeast-2",
    "ca-central-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-north-1",
    "eu-south-1",
    "me-south-1",
    "sa-east-1",
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    "us-gov-east-1",
    "us-gov-west-1",
    "cn-north-1",
    "cn-northwest-1",
    "af-south-1",
)

CHINA_REGIONS = frozenset({"cn-north-1", "cn-northwest-1"})


class ParseRegionError(ValueError):
    """Raised when a region name is not one of the known regions."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Not a valid AWS region: {name}")


@dataclass(frozen=True)
class Region:
    """A named AWS region, or a custom endpoint when ``endpoint`` is set."""

    name: str
    endpoint: Optional[str] = None

    @classmethod
    def from_name(cls, name: str) -> Region:
        normalized = name.strip().lower()
        if normalized not in KNOWN_REGIONS:
            raise ParseRegionError(name)
        return cls(name=normalized)

    @classmethod
    def custom(cls, name: str, endpoint: str) -> Region:
        return cls(name=name, endpoint=endpoint)

    @classmethod
    def default(cls, environ: Mapping[str, str] | None = None) -> Region:
        """Region from ``AWS_DEFAULT_REGION`` or ``AWS_REGION``, else ``us-east-1``."""

        env = os.environ if environ is None else environ
        for variable in ("AWS_DEFAULT_REGION", "AWS_REGION"):
            value = env.get(variable)
            if not value:
                continue
            try:
                return cls.from_name(value)
            except ParseRegionError:
                continue
        return cls(name=DEFAULT_REGION_NAME)

    @property
    def is_custom(self) -> bool:
        return self.endpoint is not None

    @property
    def is_china(self) -> bool:
        return not self.is_custom and self.name in CHINA_REGIONS

    @property
    def scheme(self) -> str:
        if self.endpoint is not None and self.endpoint.startswith("http://"):
            return "http"
        return "https"
