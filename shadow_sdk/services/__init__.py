# shadow_sdk/services/__init__.py
"""Business logic services for shadow-sdk"""

from .config_service import ConfigService
from .upload_service import UploadService
from .program_service import ProgramService
from .mint_service import MintService, SplTokenMinter, create_mint_service
from .domain_service import DomainService
from .deploy_service import DeployService, DeployOptions, resume
from .convert_service import ConvertService

__all__ = [
    "ConfigService",
    "UploadService",
    "ProgramService",
    "MintService",
    "SplTokenMinter",
    "create_mint_service",
    "DomainService",
    "DeployService",
    "DeployOptions",
    "resume",
    "ConvertService",
]
