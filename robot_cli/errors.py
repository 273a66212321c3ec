"""Error taxonomy shared by the acquisition pipeline, the materializer and the CLI.

Catalog queries and the navigation wizard never raise these for bad input;
they absorb it into a re-prompt.  Everything below ``AcquisitionError`` and
``MaterializeError`` propagates to the CLI, which prints the message and its
suggestions and exits non-zero.
"""

from __future__ import annotations


class RobotCLIError(Exception):
    """Base class for every error the CLI knows how to report."""

    suggestions: tuple[str, ...] = ()

    def __init__(self, message: str, *, suggestions: tuple[str, ...] | None = None) -> None:
        if suggestions is not None:
            self.suggestions = suggestions
        super().__init__(message)


class UserCancelled(RobotCLIError):
    """The user chose to stop. Not a failure: the CLI exits with status 0."""

    def __init__(self, message: str = "Cancelled.") -> None:
        super().__init__(message)


class InputValidationError(RobotCLIError):
    """A project name or template key supplied by the user is invalid."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or [message]
        super().__init__(message)


# ---------------------------------------------------------------------------
# Acquisition
# ---------------------------------------------------------------------------


_NETWORK_SUGGESTIONS = (
    "Check your network connection",
    "Clear the template cache: robot cache --clear",
    "Retry without the cache: robot create --no-cache",
    "Check that the template repository address is correct",
)


class AcquisitionError(RobotCLIError):
    """Raised when a template cannot be turned into a usable local tree."""

    suggestions = _NETWORK_SUGGESTIONS

    def __init__(self, message: str, *, url: str = "", template_key: str = "") -> None:
        self.url = url
        self.template_key = template_key
        super().__init__(message)


class InvalidDescriptor(AcquisitionError):
    """The descriptor has neither a usable key nor a parsable source location."""

    suggestions = ("Pick a template from: robot list",)


class TemplateNotFound(AcquisitionError):
    """The archive does not exist on the remote host (HTTP 404)."""

    suggestions = (
        "Check that the template repository still exists",
        "Check that its default branch is 'main' (or 'master' on Gitee)",
    )


class NetworkFailure(AcquisitionError):
    """Every candidate URL failed with a connection or HTTP error."""


class DownloadTimeout(AcquisitionError):
    """The last candidate URL did not answer within its timeout."""

    suggestions = (
        "The template may be large or the network slow; retry later",
        "Retry without the cache: robot create --no-cache",
    )


class WorkspaceError(AcquisitionError):
    """The cache or temp directory cannot be created or written."""

    suggestions = (
        "Check the permissions of the cache and temp directories",
        "Check the free disk space",
        "Point ROBOT_CLI_CACHE_DIR or ROBOT_CLI_TEMP_DIR at a writable directory",
    )


class ArchiveContentError(AcquisitionError):
    """Base for failures where the archive arrived but its content is unusable."""

    suggestions = (
        "Retry; the cached copy of this template has been discarded",
        "Report the broken template to its maintainers",
    )


class ExtractionFailure(ArchiveContentError):
    """The downloaded file is not a readable zip archive."""


class StructureNotFound(ArchiveContentError):
    """The archive holds no recognisable top-level project directory."""


class IntegrityFailure(ArchiveContentError):
    """The project root lacks a manifest, or the manifest does not parse."""


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------


class MaterializeError(RobotCLIError):
    """Raised when the acquired tree cannot be written into the target project."""

    suggestions = (
        "Check the permissions of the target directory",
        "Check the free disk space",
    )

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class TargetExists(MaterializeError):
    """The target directory already exists and was not removed by the caller."""

    suggestions = ("Choose another project name or remove the existing directory",)


class CopyFailure(MaterializeError):
    """Copying a file or directory into the target failed."""


class ConfigRewriteFailure(MaterializeError):
    """Rewriting the manifest, README or a dotfile in the target failed."""
