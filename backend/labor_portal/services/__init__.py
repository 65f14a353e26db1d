"""
服务层模块
提供业务逻辑的抽象层，每个服务接收调用方创建的数据库会话
"""

from .contract_service import ContractService
from .certificate_service import CertificateService
from .appointment_service import AppointmentService
from .resume_service import ResumeService
from .regulation_service import RegulationService
from .domestic_service import DomesticService
from .ticket_service import TicketService
from .profile_service import ProfileService

__all__ = [
    "ContractService",
    "CertificateService",
    "AppointmentService",
    "ResumeService",
    "RegulationService",
    "DomesticService",
    "TicketService",
    "ProfileService",
]
