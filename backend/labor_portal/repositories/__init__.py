"""
数据访问层（Repository）
每个 Repository 接收调用方创建的 SQLModel Session
"""

from .profile_repository import ProfileRepository
from .contract_repository import ContractRepository
from .certificate_repository import CertificateRepository
from .appointment_repository import AppointmentRepository
from .resume_repository import ResumeRepository
from .ticket_repository import TicketRepository
from .regulation_repository import RegulationRepository
from .domestic_repository import DomesticRepository
from .proactive_repository import ProactiveRepository
from .action_log_repository import ActionLogRepository
from .conversation_repository import ConversationRepository

__all__ = [
    "ProfileRepository",
    "ContractRepository",
    "CertificateRepository",
    "AppointmentRepository",
    "ResumeRepository",
    "TicketRepository",
    "RegulationRepository",
    "DomesticRepository",
    "ProactiveRepository",
    "ActionLogRepository",
    "ConversationRepository",
]
