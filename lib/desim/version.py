"""Version identification, for run banners and logs."""

import platform

from desim.messages import status_message

__all__ = ["REVISION_DATE", "VERSION", "full_version_string", "print_version"]

VERSION = "1.1.0"
REVISION_DATE = "2026.10.19"


def version_number_string() -> str:
    return f"Version: v.{VERSION}"


def revision_date_string() -> str:
    return f"Revision Date: {REVISION_DATE}"


def platform_string() -> str:
    system = platform.system() or "***UNKNOWN OS***"
    return f"{system} / Python {platform.python_version()}"


def full_version_string() -> str:
    return (
        f"{version_number_string()}\n"
        f"{revision_date_string()}\n"
        f"Running On: {platform_string()}"
    )


def print_version(message: str = "") -> str:
    """Emit the full version description, optionally preceded by a message line."""
    text = full_version_string()
    if message:
        text = f"{message}\n{text}"
    return status_message("", text)
