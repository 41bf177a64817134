"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .manifest import ProjectManifest


class PipelineState(Enum):
    """Deployment pipeline states, in transition order"""
    INIT = "init"
    IDENTITY_READY = "identity_ready"
    ASSETS_UPLOADED = "assets_uploaded"
    PROGRAM_READY = "program_ready"
    TOKEN_MINTED = "token_minted"
    DOMAIN_REGISTERED = "domain_registered"
    COMPLETE = "complete"
    FAILED = "failed"


class StagePolicy(Enum):
    """What a stage failure does to the run"""
    FATAL = "fatal"
    RECOVERABLE = "recoverable"


@dataclass
class StageWarning:
    """A recoverable stage problem reported alongside a successful run"""
    stage: str
    message: str
    error_code: Optional[str] = None
    guidance: Optional[str] = None

    def __str__(self) -> str:
        text = f"[{self.stage}] {self.message}"
        if self.guidance:
            text += f" ({self.guidance})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'stage': self.stage,
            'message': self.message,
        }
        if self.error_code:
            data['error_code'] = self.error_code
        if self.guidance:
            data['guidance'] = self.guidance
        return data


@dataclass
class UploadReceipt:
    """Outcome of a storage upload"""
    cid: str
    kind: str
    files_total: int
    files_published: int

    @property
    def partial(self) -> bool:
        return self.files_published < self.files_total


@dataclass
class DeployResult:
    """Deployment pipeline result"""
    state: PipelineState
    manifest: ProjectManifest
    warnings: List[StageWarning] = field(default_factory=list)
    completed_stages: List[str] = field(default_factory=list)
    skipped_stages: List[str] = field(default_factory=list)
    failed_stage: Optional[str] = None
    error: Optional[str] = None
    upload_calls: int = 0
    identity_created: bool = False
    wallet: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.state == PipelineState.COMPLETE

    @property
    def duration(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def add_warning(self, warning: StageWarning) -> None:
        self.warnings.append(warning)

    def finish(self, state: PipelineState) -> None:
        self.state = state
        self.finished_at = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'success': self.success,
            'state': self.state.value,
            'manifest': self.manifest.to_dict(),
            'warnings': [w.to_dict() for w in self.warnings],
            'completed_stages': self.completed_stages,
            'skipped_stages': self.skipped_stages,
            'upload_calls': self.upload_calls,
            'duration': self.duration,
        }

        if self.failed_stage:
            data['failed_stage'] = self.failed_stage
        if self.error:
            data['error'] = self.error

        return data


@dataclass
class ConvertResult:
    """Site conversion result"""
    manifest: ProjectManifest
    already_converted: bool = False
    integration_path: Optional[str] = None
    warnings: List[StageWarning] = field(default_factory=list)
    identity_created: bool = False
    wallet: Optional[str] = None
