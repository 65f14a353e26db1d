"""
数据库模型模块
导出所有表模型和枚举类型
"""

# 用户域模型
from .user import UserProfile, UserBehavior

# 劳工档案域模型
from .contract import EmploymentContract, ContractStatus
from .certificate import Certificate, CertificateType
from .appointment import LaborAppointment, AppointmentStatus
from .resume import Resume, ResumeCourse
from .ticket import Ticket, TicketStatus
from .regulation import WorkRegulation
from .domestic import DomesticLaborRequest, DomesticRequestStatus

# 智能体域模型
from .proactive import ProactiveEvent
from .action_log import AgentActionLog
from .conversation import Conversation, MessageRole

# 基础模型
from .base import TimestampModel, new_id, utc_now, as_utc

# 定义导出的内容
__all__ = [
    # 用户域
    "UserProfile", "UserBehavior",
    # 劳工档案域
    "EmploymentContract", "ContractStatus",
    "Certificate", "CertificateType",
    "LaborAppointment", "AppointmentStatus",
    "Resume", "ResumeCourse",
    "Ticket", "TicketStatus",
    "WorkRegulation",
    "DomesticLaborRequest", "DomesticRequestStatus",
    # 智能体域
    "ProactiveEvent",
    "AgentActionLog",
    "Conversation", "MessageRole",
    # 基础模型
    "TimestampModel", "new_id", "utc_now", "as_utc"
]
