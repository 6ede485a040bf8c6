from __future__ import annotations
"""Virtual-hosted-style versus path-style bucket addressing."""
from enum import Enum
import logging

from .errors import InvalidDnsNameError
from .regions import Region

LOGGER = logging.getLogger(__name__)

_LOWER_ALNUM = frozenset("abcdefghijklmnopqrstuvwxyz0123456789")
_LOWER_ALNUM_HYPHEN = _LOWER_ALNUM | {"-"}


class AddressingStyle(Enum):
    """How the bucket name is placed in the request."""

    AUTO = "auto"
    VIRTUAL = "virtual"
    PATH = "path"

    @classmethod
    def parse(cls, value: str) -> AddressingStyle:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"addressing style must be one of auto, virtual, path (got {value!r})"
            ) from None


def is_valid_dns_name(bucket_name: str) -> bool:
    """Return whether ``bucket_name`` can be used for virtual-hosted-style access.

    Matches ``^[a-z0-9][a-z0-9-]*[a-z0-9]$`` with a length of 3 to 63
    characters. Names containing "." are rejected even though they are valid
    DNS labels: the dots break TLS certificate matching on the
    ``<bucket>.s3.<region>.amazonaws.com`` wildcard.
    """

    if not 3 <= len(bucket_name) <= 63:
        return False
    first, middle, last = bucket_name[0], bucket_name[1:-1], bucket_name[-1]
    return (
        first in _LOWER_ALNUM
        and last in _LOWER_ALNUM
        and all(char in _LOWER_ALNUM_HYPHEN for char in middle)
    )


def extract_hostname(endpoint: str) -> str:
    """Return the ``host[:port]`` part of an endpoint URL."""

    _, separator, rest = endpoint.partition("://")
    unschemed = rest if separator else endpoint
    return unschemed.split("/", 1)[0]


def build_path_style_hostname(region: Region) -> str:
    if region.endpoint is not None:
        return extract_hostname(region.endpoint)
    if region.is_china:
        return f"s3.{region.name}.amazonaws.com.cn"
    return f"s3.{region.name}.amazonaws.com"


def build_virtual_style_hostname(base_hostname: str, bucket: str) -> str:
    if not is_valid_dns_name(bucket):
        raise InvalidDnsNameError(f"Invalid DNS name. bucket: {bucket}")
    return f"{bucket}.{base_hostname}"


def build_s3_hostname(
    style: AddressingStyle, region: Region, bucket: str
) -> tuple[bool, str]:
    """Resolve the hostname for ``bucket`` in ``region``.

    Returns:
        ``(is_virtual, hostname)``.

    Raises:
        InvalidDnsNameError: when ``style`` is ``VIRTUAL`` and the bucket name
            cannot be used as a subdomain.
    """

    base_hostname = build_path_style_hostname(region)
    if style is AddressingStyle.PATH:
        return False, base_hostname
    try:
        return True, build_virtual_style_hostname(base_hostname, bucket)
    except InvalidDnsNameError:
        if style is AddressingStyle.VIRTUAL:
            raise
        LOGGER.debug(
            "Bucket '%s' is not DNS compatible; using path-style addressing on %s",
            bucket,
            base_hostname,
        )
        return False, base_hostname
