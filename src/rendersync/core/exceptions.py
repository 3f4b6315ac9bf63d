"""Exceptions raised by rendersync.

Each exception carries a machine-readable ``code`` so that framework glue
can translate it into a response or fall back to another path.
"""


class RenderSyncError(Exception):
    """Base exception for all rendersync errors."""

    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, detail: dict[str, object] | None = None):
        self.message = message or self.__class__.message
        self.detail = detail
        super().__init__(self.message)


class ConfigurationError(RenderSyncError):
    code = "configuration_error"
    message = "rendersync is not configured."


class UnaddressableParentError(RenderSyncError):
    code = "unaddressable_parent"
    message = "A parent scope must be persisted before it can be addressed."


class UnaddressableSubjectError(RenderSyncError):
    code = "unaddressable_subject"
    message = "An unpersisted record has no canonical path."


class UnknownScopeParamError(RenderSyncError):
    code = "unknown_scope_param"
    message = "Scope parameter value has no path rendering."


class UnknownScopeError(RenderSyncError):
    code = "unknown_scope"
    message = "No scope with that name is defined."


class ScopeArgumentError(RenderSyncError):
    code = "scope_argument_error"
    message = "Scope arguments do not match its declared parameters."


class InvalidSignatureError(RenderSyncError):
    code = "invalid_signature"
    message = "Channel signature does not match."
