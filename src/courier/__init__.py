"""Courier: a standalone certificate delivery service."""

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0
VERSION_RELEASE_LEVEL = "beta"
VERSION_RELEASE_NUMBER = 1

# Set at build time to the short git hash of the release
GIT_VERSION = ""


def get_version() -> str:
    """Returns the semantic version for the current build."""
    version = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
    if VERSION_RELEASE_LEVEL:
        if VERSION_RELEASE_NUMBER > 0:
            version = f"{version}-{VERSION_RELEASE_LEVEL}.{VERSION_RELEASE_NUMBER}"
        else:
            version = f"{version}-{VERSION_RELEASE_LEVEL}"

    if GIT_VERSION:
        version = f"{version} ({GIT_VERSION})"

    return version


__version__ = get_version()
