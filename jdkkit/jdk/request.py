"""
Install request normalization, download URL construction and cache keys.

Everything in this module is pure: the same InstallRequest always yields the
same URL and the same cache version spec.
"""

from dataclasses import dataclass, field
from urllib.parse import quote

DEFAULT_API_BASE_URL = "https://api.adoptopenjdk.net"

# Bump to invalidate every existing cache entry
CACHE_SCHEMA_VERSION = "1.0.0"

RELEASE_TYPE_ALIASES = {
    "releases": "ga",
    "nightly": "ea",
}

# Characters JavaScript's encodeURIComponent leaves untouched besides
# the alphanumerics and "_.-~" that quote() always keeps.
_URI_COMPONENT_SAFE = "!*'()"


def get_feature_version(version: str) -> str:
    """
    Strip a literal 'openjdk' prefix from a version string.

    Example:
        >>> get_feature_version("openjdk11")
        '11'
        >>> get_feature_version("11")
        '11'
    """
    return version.removeprefix("openjdk")


def get_release_type(release_type: str) -> str:
    """
    Resolve release type aliases.

    'releases' maps to 'ga' and 'nightly' to 'ea'; any other value is
    returned verbatim.
    """
    return RELEASE_TYPE_ALIASES.get(release_type, release_type)


def encode_uri_component(value: str) -> str:
    """Percent-encode a single URL path segment."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


@dataclass(frozen=True)
class InstallRequest:
    """
    A normalized JDK install request.

    Attributes:
        release_type: Canonical release type ('ga', 'ea' or a pass-through value)
        version: Version exactly as requested (used for JAVA_HOME_<version>_<arch>)
        implementation: JVM implementation, e.g. 'hotspot', 'openj9'
        architecture: CPU architecture, e.g. 'x64', 'aarch64'
        heap_size: Heap size class, 'normal' or 'large'
        release: 'latest' or an exact release name
        feature_version: version with the 'openjdk' prefix stripped
    """

    release_type: str
    version: str
    implementation: str = "hotspot"
    architecture: str = "x64"
    heap_size: str = "normal"
    release: str = "latest"
    feature_version: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "release_type", get_release_type(self.release_type))
        object.__setattr__(self, "feature_version", get_feature_version(self.version))

    @property
    def is_latest(self) -> bool:
        return self.release == "latest"


def get_download_url(
    request: InstallRequest,
    platform: str,
    api_base_url: str = DEFAULT_API_BASE_URL,
) -> str:
    """
    Build the binary download URL for a request.

    Args:
        request: Normalized install request
        platform: Platform family ('windows', 'mac', 'linux')
        api_base_url: Base URL of the binary API

    Returns:
        The 'latest' lookup URL when release is 'latest', otherwise the
        exact-release lookup URL with the release name percent-encoded

    Example:
        >>> get_download_url(InstallRequest("ga", "11"), "linux")
        'https://api.adoptopenjdk.net/v3/binary/latest/11/ga/linux/x64/jdk/hotspot/normal/adoptopenjdk'
    """
    base = api_base_url.rstrip("/")
    tail = (
        f"{platform}/{request.architecture}/jdk/"
        f"{request.implementation}/{request.heap_size}/adoptopenjdk"
    )

    if request.is_latest:
        return (
            f"{base}/v3/binary/latest/"
            f"{request.feature_version}/{request.release_type}/{tail}"
        )

    release_name = encode_uri_component(request.release)
    return f"{base}/v3/binary/version/{release_name}/{tail}"


def _escape_key_field(value: str) -> str:
    # "-" is the field separator; encode it so fields can't run together
    return quote(value, safe="").replace("-", "%2D")


def get_cache_version_spec(request: InstallRequest) -> str:
    """
    Build the cache version spec for a request.

    The architecture is not part of the key; the tool cache keeps it as a
    separate dimension.

    Example:
        >>> get_cache_version_spec(InstallRequest("releases", "openjdk11"))
        '1.0.0-ga-11-hotspot-normal-latest'
    """
    fields = (
        request.release_type,
        request.feature_version,
        request.implementation,
        request.heap_size,
        request.release,
    )
    return "-".join([CACHE_SCHEMA_VERSION] + [_escape_key_field(f) for f in fields])
