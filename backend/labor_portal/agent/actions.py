"""
智能体动作注册表

AgentAction 是封闭枚举，ACTION_REGISTRY 为每个成员登记处理函数和必填字段。
模块导入时检查注册表是否覆盖全部枚举成员，漏登记的动作无法通过导入。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Tuple

from sqlmodel import Session

from labor_portal.services.appointment_service import AppointmentService
from labor_portal.services.certificate_service import CertificateService
from labor_portal.services.contract_service import ContractService
from labor_portal.services.domestic_service import DomesticService
from labor_portal.services.profile_service import ProfileService
from labor_portal.services.regulation_service import RegulationService
from labor_portal.services.resume_service import ResumeService, RESUME_FIELDS
from labor_portal.services.ticket_service import TicketService


class AgentAction(str, Enum):
    """智能体可执行的动作"""
    # 合同
    END_CONTRACT = "end_contract"
    GET_CONTRACTS = "get_contracts"
    # 证书
    GENERATE_SALARY_CERTIFICATE = "generate_salary_certificate"
    GENERATE_SERVICE_CERTIFICATE = "generate_service_certificate"
    GENERATE_LABOR_LICENSE = "generate_labor_license"
    GET_CERTIFICATES = "get_certificates"
    # 预约
    BOOK_APPOINTMENT = "book_appointment"
    CANCEL_APPOINTMENT = "cancel_appointment"
    COMPLETE_APPOINTMENT = "complete_appointment"
    GET_APPOINTMENTS = "get_appointments"
    # 简历
    UPDATE_RESUME = "update_resume"
    ADD_COURSE = "add_course"
    GET_RESUME = "get_resume"
    # 工单
    CREATE_TICKET = "create_ticket"
    CLOSE_TICKET = "close_ticket"
    GET_TICKETS = "get_tickets"
    # 法规
    SEARCH_REGULATIONS = "search_regulations"
    # 家政劳工
    CREATE_DOMESTIC_REQUEST = "create_domestic_request"
    GET_DOMESTIC_REQUESTS = "get_domestic_requests"
    # 反馈
    SUBMIT_FEEDBACK = "submit_feedback"


Handler = Callable[[Session, Dict[str, Any]], Any]


@dataclass(frozen=True)
class ActionSpec:
    """动作定义：处理函数、必填字段、可选字段、给 LLM 看的描述"""
    handler: Handler
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""


# ==================== 处理函数 ====================
# 载荷带 user_id 时，按记录 ID 操作的动作只作用于该用户自己的记录

def _end_contract(session: Session, payload: Dict[str, Any]):
    return ContractService(session).end_contract(payload["contract_id"], payload.get("user_id"))


def _get_contracts(session: Session, payload: Dict[str, Any]):
    return ContractService(session).get_contracts(payload["user_id"])


def _generate_salary_certificate(session: Session, payload: Dict[str, Any]):
    return CertificateService(session).generate_salary_definition(payload["user_id"])


def _generate_service_certificate(session: Session, payload: Dict[str, Any]):
    return CertificateService(session).generate_service_certificate(payload["user_id"])


def _generate_labor_license(session: Session, payload: Dict[str, Any]):
    return CertificateService(session).generate_labor_license(payload["user_id"])


def _get_certificates(session: Session, payload: Dict[str, Any]):
    return CertificateService(session).get_certificates(payload["user_id"])


def _book_appointment(session: Session, payload: Dict[str, Any]):
    return AppointmentService(session).book_appointment(
        user_id=payload["user_id"],
        appointment_type=payload["appointment_type"],
        appointment_date=payload["appointment_date"],
        notes=payload.get("notes"),
        office_location=payload.get("office_location")
    )


def _cancel_appointment(session: Session, payload: Dict[str, Any]):
    return AppointmentService(session).cancel_appointment(payload["appointment_id"], payload.get("user_id"))


def _complete_appointment(session: Session, payload: Dict[str, Any]):
    return AppointmentService(session).complete_appointment(payload["appointment_id"], payload.get("user_id"))


def _get_appointments(session: Session, payload: Dict[str, Any]):
    return AppointmentService(session).get_appointments(payload["user_id"])


def _update_resume(session: Session, payload: Dict[str, Any]):
    data = {key: payload[key] for key in RESUME_FIELDS if key in payload}
    return ResumeService(session).update_resume(payload["user_id"], data)


def _add_course(session: Session, payload: Dict[str, Any]):
    return ResumeService(session).add_course(
        resume_id=payload["resume_id"],
        course_name=payload["course_name"],
        provider=payload["provider"],
        date_completed=payload["date_completed"],
        certificate_url=payload.get("certificate_url"),
        user_id=payload.get("user_id")
    )


def _get_resume(session: Session, payload: Dict[str, Any]):
    return ResumeService(session).get_resume_with_courses(payload["user_id"])


def _create_ticket(session: Session, payload: Dict[str, Any]):
    return TicketService(session).open_ticket(
        payload["user_id"], payload["title"], payload["category"]
    )


def _close_ticket(session: Session, payload: Dict[str, Any]):
    return TicketService(session).close_ticket(payload["user_id"], payload["ticket_id"])


def _get_tickets(session: Session, payload: Dict[str, Any]):
    return TicketService(session).get_tickets(payload["user_id"])


def _search_regulations(session: Session, payload: Dict[str, Any]):
    return RegulationService(session).search_regulations(payload["query"])


def _create_domestic_request(session: Session, payload: Dict[str, Any]):
    return DomesticService(session).create_domestic_request(
        user_id=payload["user_id"],
        request_type=payload["request_type"],
        worker_nationality=payload["worker_nationality"],
        request_details=payload.get("request_details")
    )


def _get_domestic_requests(session: Session, payload: Dict[str, Any]):
    return DomesticService(session).get_domestic_requests(payload["user_id"])


def _submit_feedback(session: Session, payload: Dict[str, Any]):
    return ProfileService(session).record_feedback(
        payload["user_id"], payload["score"], payload.get("message")
    )


# ==================== 注册表 ====================

ACTION_REGISTRY: Dict[AgentAction, ActionSpec] = {
    AgentAction.END_CONTRACT: ActionSpec(
        _end_contract, ("contract_id",), ("user_id",),
        "End an active employment contract. The end date is set to today."
    ),
    AgentAction.GET_CONTRACTS: ActionSpec(
        _get_contracts, ("user_id",),
        description="List the user's employment contracts."
    ),
    AgentAction.GENERATE_SALARY_CERTIFICATE: ActionSpec(
        _generate_salary_certificate, ("user_id",),
        description="Issue a salary definition letter from the user's active contract."
    ),
    AgentAction.GENERATE_SERVICE_CERTIFICATE: ActionSpec(
        _generate_service_certificate, ("user_id",),
        description="Issue a service (experience) certificate from the user's active contract."
    ),
    AgentAction.GENERATE_LABOR_LICENSE: ActionSpec(
        _generate_labor_license, ("user_id",),
        description="Issue a one-year labor license from the user's active contract."
    ),
    AgentAction.GET_CERTIFICATES: ActionSpec(
        _get_certificates, ("user_id",),
        description="List certificates issued to the user."
    ),
    AgentAction.BOOK_APPOINTMENT: ActionSpec(
        _book_appointment, ("user_id", "appointment_type", "appointment_date"),
        ("notes", "office_location"),
        "Book a labor office appointment. appointment_date is YYYY-MM-DD."
    ),
    AgentAction.CANCEL_APPOINTMENT: ActionSpec(
        _cancel_appointment, ("appointment_id",), ("user_id",),
        "Cancel a scheduled appointment."
    ),
    AgentAction.COMPLETE_APPOINTMENT: ActionSpec(
        _complete_appointment, ("appointment_id",), ("user_id",),
        "Mark a scheduled appointment as completed."
    ),
    AgentAction.GET_APPOINTMENTS: ActionSpec(
        _get_appointments, ("user_id",),
        description="List the user's appointments."
    ),
    AgentAction.UPDATE_RESUME: ActionSpec(
        _update_resume, ("user_id",), RESUME_FIELDS,
        "Create or update the user's resume. Only the provided fields change."
    ),
    AgentAction.ADD_COURSE: ActionSpec(
        _add_course, ("resume_id", "course_name", "provider", "date_completed"),
        ("certificate_url", "user_id"),
        "Add a completed training course to a resume. date_completed is YYYY-MM-DD."
    ),
    AgentAction.GET_RESUME: ActionSpec(
        _get_resume, ("user_id",),
        description="Get the user's resume with its courses."
    ),
    AgentAction.CREATE_TICKET: ActionSpec(
        _create_ticket, ("user_id", "title", "category"),
        description="Open a support ticket."
    ),
    AgentAction.CLOSE_TICKET: ActionSpec(
        _close_ticket, ("user_id", "ticket_id"),
        description="Close one of the user's open tickets (by id or ticket number)."
    ),
    AgentAction.GET_TICKETS: ActionSpec(
        _get_tickets, ("user_id",),
        description="List the user's support tickets and their status."
    ),
    AgentAction.SEARCH_REGULATIONS: ActionSpec(
        _search_regulations, ("query",), ("user_id",),
        "Search labor regulations by keyword."
    ),
    AgentAction.CREATE_DOMESTIC_REQUEST: ActionSpec(
        _create_domestic_request, ("user_id", "request_type", "worker_nationality"),
        ("request_details",),
        "Submit a domestic labor request."
    ),
    AgentAction.GET_DOMESTIC_REQUESTS: ActionSpec(
        _get_domestic_requests, ("user_id",),
        description="List the user's domestic labor requests."
    ),
    AgentAction.SUBMIT_FEEDBACK: ActionSpec(
        _submit_feedback, ("user_id", "score"), ("message",),
        "Record the user's satisfaction score (1-5)."
    ),
}


def _check_registry_complete() -> None:
    missing = [action.value for action in AgentAction if action not in ACTION_REGISTRY]
    if missing:
        raise RuntimeError(f"ACTION_REGISTRY 缺少动作定义: {', '.join(missing)}")


_check_registry_complete()


def available_actions():
    """所有支持的动作名（只读）"""
    return tuple(action.value for action in AgentAction)
