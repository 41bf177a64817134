"""Exception definitions for shadow-sdk API"""

from typing import Any, Dict, Optional

from ..constants import ErrorCode


class ShadowSDKError(Exception):
    """Base exception for shadow-sdk"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class StateCorruptError(ShadowSDKError, OSError):
    """Persisted local state (wallet or manifest) is unreadable or malformed

    Never recovered automatically: regenerating the wallet would orphan
    anything already registered on-chain for it.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.STATE_CORRUPT)
        self.path = path


class ProjectNotFoundError(ShadowSDKError):
    """Project manifest not found"""

    def __init__(self, message: str = None):
        if message is None:
            message = (
                "shadow.json not found. Please ensure:\n"
                "1. You are in a Shadow project directory\n"
                "2. Or use --path to point at the project\n"
                "\n"
                "Initialize a new project: shadow init <name>"
            )
        super().__init__(message, ErrorCode.PROJECT_NOT_FOUND)


class ConfigError(ShadowSDKError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class BackendError(ShadowSDKError):
    """Backend REST call failed (transport error or non-2xx status)"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Any = None):
        super().__init__(message, ErrorCode.BACKEND_ERROR)
        self.status_code = status_code
        self.body = body


class RpcError(ShadowSDKError):
    """On-chain RPC call failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.RPC_ERROR)


class StageError(ShadowSDKError):
    """Error raised by a deployment pipeline stage

    Carries the stage name, the backend or network involved and the
    underlying cause so the orchestrator can apply the stage policy.
    """

    stage: str = "pipeline"
    default_code: str = ErrorCode.PIPELINE_FAILED

    def __init__(self, message: str,
                 context: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None,
                 error_code: str = None):
        super().__init__(message, error_code or self.default_code)
        self.context = dict(context or {})
        self.cause = cause

    def describe(self) -> str:
        """Stage-attributed one-line description"""
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        text = f"[{self.stage}] {self}"
        if details:
            text += f" ({details})"
        if self.cause is not None and str(self.cause) not in str(self):
            text += f": {self.cause}"
        return text


class DiscoveryError(StageError):
    """Project files could not be enumerated or read"""

    stage = "discovery"
    default_code = ErrorCode.DISCOVERY_FAILED


class EmptyFileSetError(DiscoveryError):
    """Content discovery produced nothing to publish"""

    default_code = ErrorCode.EMPTY_FILE_SET


class UploadError(StageError):
    """Storage backend upload failed"""

    stage = "upload"
    default_code = ErrorCode.UPLOAD_FAILED


class ProgramStageError(StageError):
    """Base class for program deployment stage errors"""

    stage = "program"
    default_code = ErrorCode.DEPLOYMENT_FAILED


class ToolchainMissingError(ProgramStageError):
    """Build/deploy toolchain is not installed or project has no program"""

    default_code = ErrorCode.TOOLCHAIN_MISSING


class DeploymentFailedError(ProgramStageError):
    """Toolchain ran but the build or deployment itself failed"""

    default_code = ErrorCode.DEPLOYMENT_FAILED


class AddressExtractionError(ProgramStageError):
    """No valid program address could be extracted"""

    default_code = ErrorCode.ADDRESS_EXTRACTION_FAILED


class MintError(StageError):
    """Ownership token minting failed"""

    stage = "mint"
    default_code = ErrorCode.MINT_FAILED


class DomainStageError(StageError):
    """Base class for domain registration stage errors"""

    stage = "domain"
    default_code = ErrorCode.REGISTRATION_FAILED


class InvalidDomainError(DomainStageError):
    """Domain failed syntactic validation (no network call was made)"""

    default_code = ErrorCode.INVALID_DOMAIN


class DomainConflictError(DomainStageError):
    """Domain is already registered to a different owner"""

    default_code = ErrorCode.DOMAIN_CONFLICT

    def __init__(self, domain: str, owner: Optional[str] = None,
                 guidance: Optional[str] = None, **kwargs):
        message = f"Domain already registered by another owner: {domain}"
        super().__init__(message, **kwargs)
        self.domain = domain
        self.owner = owner
        self.guidance = guidance


class RegistrationError(DomainStageError):
    """Domain registration request failed"""

    default_code = ErrorCode.REGISTRATION_FAILED


def describe_error(stage: str, error: BaseException) -> str:
    """Stage-attributed description for any pipeline failure"""
    if isinstance(error, StageError):
        return error.describe()
    return f"[{stage}] {error}"


class PipelineFailedError(ShadowSDKError):
    """Deployment pipeline aborted on a fatal stage error"""

    def __init__(self, stage: str, error: BaseException, result: Any = None):
        super().__init__(describe_error(stage, error), ErrorCode.PIPELINE_FAILED)
        self.stage = stage
        self.error = error
        self.result = result
