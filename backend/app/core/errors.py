"""Error Hierarchy - typed, categorized exceptions for every document store failure.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; store faults (500-level) are critical
    - to_response() produces the minimal REST envelope; headers() carries Allow etc.
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DocStoreError base: FastAPI global handler catches all
    - Request path and method are attached by the API error handler, not here
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    METHOD = "method"
    MEDIA_TYPE = "media_type"
    PRECONDITION = "precondition"
    AUTHORIZATION = "authorization"
    STORAGE = "storage"
    INTERNAL = "internal"


class DocStoreError(Exception):
    """Base exception for all document store errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def headers(self) -> dict[str, str]:
        """Extra response headers required by the status code."""
        return {}

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(DocStoreError):
    """Path does not resolve in any domain."""
    def __init__(self, path: str):
        super().__init__(
            f"Resource '{path}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.path = path


class MethodNotAllowedError(DocStoreError):
    """Verb not applicable to the target (leaf, root, marker)."""
    def __init__(self, path: str, allow: tuple[str, ...]):
        super().__init__(
            f"Method not allowed on '{path}'",
            "METHOD_NOT_ALLOWED", ErrorCategory.METHOD,
            ErrorSeverity.WARNING, 405,
        )
        self.allow = allow

    def headers(self) -> dict[str, str]:
        return {"Allow": ", ".join(self.allow)}


class UnsupportedMediaTypeError(DocStoreError):
    """Content-Type missing or not mappable to a stored type."""
    def __init__(self, content_type: str | None):
        super().__init__(
            f"Unsupported media type: {content_type!r}",
            "UNSUPPORTED_MEDIA_TYPE", ErrorCategory.MEDIA_TYPE,
            ErrorSeverity.WARNING, 415,
        )
        self.content_type = content_type


class InvalidPayloadError(DocStoreError):
    """Identity profile payload or User-Id header is malformed."""
    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(
            message, "INVALID_PAYLOAD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400,
        )
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        if self.details:
            response["error"]["details"] = self.details
        return response


class PreconditionFailedError(DocStoreError):
    """If-Match does not hold against the current resource state."""
    def __init__(self, path: str):
        super().__init__(
            f"Precondition failed for '{path}'",
            "PRECONDITION_FAILED", ErrorCategory.PRECONDITION,
            ErrorSeverity.WARNING, 412,
        )


class ForbiddenError(DocStoreError):
    """Write denied: no owner, missing or invalid signature."""

    OWNER_MISSING = "OWNER_MISSING"
    SIGNATURE_MISSING = "SIGNATURE_MISSING"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"

    def __init__(self, reason: str):
        super().__init__(
            "Write not authorized",
            reason, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, 403,
        )
        self.reason = reason


# ─── Store Faults (500-level) ───────────────────────────────────

class StoredIdentityError(DocStoreError):
    """Identity profile on disk is corrupt (undecodable data or public key)."""
    def __init__(self, message: str):
        super().__init__(
            f"Stored identity is corrupt: {message}",
            "STORED_IDENTITY_CORRUPT", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, 500,
        )


class OwnershipTraversalError(DocStoreError):
    """Ancestor walk exceeded its hop cap."""
    def __init__(self, max_depth: int):
        super().__init__(
            f"Ownership lookup exceeded {max_depth} hops",
            "OWNERSHIP_TRAVERSAL_EXCEEDED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )
        self.max_depth = max_depth


class IdAllocationError(DocStoreError):
    """Id generator kept returning identifiers that already exist."""
    def __init__(self, attempts: int):
        super().__init__(
            f"Could not allocate a fresh identifier after {attempts} attempts",
            "ID_ALLOCATION_FAILED", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, 500,
        )


class BootstrapIndexMissingError(DocStoreError):
    """Startup precondition: the bootstrap index document must exist."""
    def __init__(self, index_path: str):
        super().__init__(
            f"Bootstrap index document missing: {index_path}",
            "BOOTSTRAP_INDEX_MISSING", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )
        self.index_path = index_path
