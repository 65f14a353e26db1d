"""
简历导入服务

上传简历 -> 提取文本 -> LLM 解析 -> 与现有资料合并为待确认变更 -> 用户确认后写库。
待确认变更保存在进程内存中，30 分钟后过期。
"""

import re
import time
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import ValidationError
from sqlmodel import Session

from labor_portal.agent.model_router import ModelComplexity, ModelRouter
from labor_portal.agent.resume_parser import ExtractedResume, ProposedChanges, parse_resume_text
from labor_portal.config import (
    RESUME_IMPORT_TTL_SECONDS,
    RESUME_TEXT_MIN_LENGTH,
    RESUME_UPLOAD_MAX_BYTES,
)
from labor_portal.exceptions import InputValidationError, LaborPortalError, NotFoundError, UpstreamError
from labor_portal.models import ContractStatus, Resume, UserProfile, utc_now
from labor_portal.repositories import ActionLogRepository
from labor_portal.services.contract_service import ContractService
from labor_portal.services.document_parser import UNKNOWN, detect_file_type, extract_text, sanitize_resume_text
from labor_portal.services.profile_service import ProfileService
from labor_portal.services.resume_service import ResumeService, clean_resume_data
from labor_portal.services.ticket_service import TicketService
from labor_portal.services.utils import is_missing, validate_user_id


# 简历中可导入到 user_profile 的字段
IMPORTABLE_PROFILE_FIELDS = ("full_name", "email", "phone", "nationality")

# 简历中可导入到 resumes 的文本字段
IMPORTABLE_RESUME_TEXT_FIELDS = ("job_title", "summary", "education")

IMPORTED_CONTRACT_TYPE = "دوام كامل"
RESUME_IMPORT_TICKET_TITLE = "تحديث الملف الشخصي من السيرة الذاتية المرفوعة"
RESUME_IMPORT_TICKET_CATEGORY = "agent_action"

PARTIAL_DATE_PATTERN = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?")


def parse_partial_date(value: Any, default: Optional[date] = None) -> Optional[date]:
    """
    解析简历中的日期，支持 YYYY、YYYY-MM、YYYY-MM-DD
    缺失的月、日取 1，无法识别时返回 default
    """
    if is_missing(value):
        return default
    match = PARTIAL_DATE_PATTERN.match(str(value).strip())
    if match:
        year, month, day = match.groups()
        try:
            return date(int(year), int(month or 1), int(day or 1))
        except ValueError:
            pass
    return default


def merge_resume_data(
    extracted: ExtractedResume,
    profile: Optional[UserProfile] = None,
    resume: Optional[Resume] = None
) -> ProposedChanges:
    """
    把解析结果与现有资料合并为待确认变更

    规则：
    1. 非空且与现有值不同的资料、简历字段都作为建议
    2. 技能合并：保留现有技能，追加新技能（不区分大小写去重）
    3. 工作年限只在大于 0 时建议
    4. 有公司和职位的经历、有名称和机构的课程作为新增项

    Args:
        extracted: LLM 解析结果
        profile: 现有用户资料（可选）
        resume: 现有最新简历（可选）

    Returns:
        ProposedChanges 对象
    """
    changes = ProposedChanges()

    personal = extracted.personal_info.model_dump()
    for key in IMPORTABLE_PROFILE_FIELDS:
        value = personal.get(key)
        if is_missing(value):
            continue
        value = value.strip()
        if profile is None or getattr(profile, key) != value:
            changes.profile[key] = value

    for key in IMPORTABLE_RESUME_TEXT_FIELDS:
        value = getattr(extracted, key)
        if is_missing(value):
            continue
        value = value.strip()
        if resume is None or getattr(resume, key) != value:
            changes.resume[key] = value

    existing_skills = list(resume.skills or []) if resume else []
    known = {skill.lower() for skill in existing_skills}
    new_skills = []
    for skill in extracted.skills:
        skill = skill.strip()
        if skill and skill.lower() not in known:
            known.add(skill.lower())
            new_skills.append(skill)
    if new_skills:
        changes.resume["skills"] = existing_skills + new_skills

    if extracted.experience_years > 0 and (resume is None or resume.experience_years != extracted.experience_years):
        changes.resume["experience_years"] = extracted.experience_years

    changes.new_experiences = [e for e in extracted.experience if e.company.strip() and e.position.strip()]
    changes.new_courses = [c for c in extracted.courses if c.name.strip() and c.institution.strip()]

    print(
        f"[ResumeImport] 合并完成: 资料 {len(changes.profile)}，简历 {len(changes.resume)}，"
        f"经历 {len(changes.new_experiences)}，课程 {len(changes.new_courses)}"
    )
    return changes


def summarize_changes(changes: ProposedChanges) -> str:
    """给用户看的变更摘要（阿拉伯语）"""
    parts = []
    if changes.profile:
        parts.append(f"{len(changes.profile)} تحديث للملف الشخصي")
    if changes.resume:
        parts.append(f"{len(changes.resume)} تحديث للسيرة الذاتية")
    if changes.new_experiences:
        parts.append(f"{len(changes.new_experiences)} خبرة عمل جديدة")
    if changes.new_courses:
        parts.append(f"{len(changes.new_courses)} دورة تدريبية جديدة")

    if not parts:
        return "لم يتم العثور على تغييرات جديدة"
    return "وُجد: " + "، ".join(parts)


class ResumeImportStore:
    """
    待确认导入会话的进程内存储
    过期的会话在读取和写入时清理
    """

    def __init__(
        self,
        ttl_seconds: float = RESUME_IMPORT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    def _expired(self, stored_at: float) -> bool:
        return self.clock() - stored_at > self.ttl_seconds

    def _purge(self) -> None:
        for session_id in [key for key, (stored_at, _) in self._entries.items() if self._expired(stored_at)]:
            del self._entries[session_id]

    def put(self, entry: Dict[str, Any]) -> str:
        self._purge()
        session_id = f"resume_upload_{uuid.uuid4().hex}"
        self._entries[session_id] = (self.clock(), entry)
        return session_id

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        item = self._entries.get(session_id)
        if item is None:
            return None

        stored_at, entry = item
        if self._expired(stored_at):
            del self._entries[session_id]
            return None
        return entry

    def delete(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# 全局导入会话存储
resume_import_store = ResumeImportStore()


class ResumeImportService:
    """
    简历导入服务

    使用示例：
        service = ResumeImportService(session, model_router)
        pending = service.upload(user_id, text_content=resume_text)
        service.confirm(pending["session_id"], user_id, pending["proposed_changes"])
    """

    def __init__(
        self,
        session: Session,
        router: ModelRouter,
        store: Optional[ResumeImportStore] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            session: SQLModel 数据库会话
            router: 模型路由器，解析使用 medium 路由
            store: 待确认会话存储，默认使用全局实例
            clock: 返回当前 UTC 时间的函数
        """
        self.router = router
        self.store = store if store is not None else resume_import_store
        self.clock = clock
        self.profiles = ProfileService(session)
        self.resumes = ResumeService(session)
        self.contracts = ContractService(session, clock=clock)
        self.tickets = TicketService(session)
        self.logs = ActionLogRepository(session)

    def read_resume_text(
        self,
        text_content: Optional[str] = None,
        file_bytes: Optional[bytes] = None,
        filename: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> str:
        """
        取得简历文本：优先使用直接提供的文本，否则从上传文件中提取

        Raises:
            InputValidationError: 没有输入、类型不支持、文件过大或可读文本太少
        """
        if not is_missing(text_content):
            text = sanitize_resume_text(text_content)
        elif file_bytes is not None:
            file_type = detect_file_type(filename, content_type)
            if file_type == UNKNOWN:
                raise InputValidationError("Unsupported file type. Upload a PDF, DOCX or TXT file")
            if len(file_bytes) > RESUME_UPLOAD_MAX_BYTES:
                raise InputValidationError("File must be smaller than 5 MB")
            text = sanitize_resume_text(extract_text(file_bytes, file_type))
        else:
            raise InputValidationError("Upload a file or provide text_content")

        if len(text.strip()) < RESUME_TEXT_MIN_LENGTH:
            raise InputValidationError("Not enough readable text in the resume")
        return text

    def upload(
        self,
        user_id: str,
        text_content: Optional[str] = None,
        file_bytes: Optional[bytes] = None,
        filename: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        解析简历并生成待确认变更

        Returns:
            {"session_id", "proposed_changes", "extracted_data", "summary", "expires_at"}

        Raises:
            InputValidationError: 输入不合法
            UpstreamError: 模型调用失败
        """
        validate_user_id(user_id)
        resume_text = self.read_resume_text(text_content, file_bytes, filename, content_type)

        model_name = self.router.get_model_name(ModelComplexity.MEDIUM)
        try:
            llm = self.router.get_optimal_model(ModelComplexity.MEDIUM)
            extracted = parse_resume_text(llm, resume_text)
        except LaborPortalError:
            raise
        except Exception as e:
            raise UpstreamError(model_name, str(e)) from e

        changes = merge_resume_data(
            extracted,
            self.profiles.get_profile(user_id),
            self.resumes.get_resume(user_id)
        )
        summary = summarize_changes(changes)
        now = self.clock()
        pending = {
            "user_id": user_id,
            "proposed_changes": changes.model_dump(),
            "extracted_data": extracted.model_dump(),
            "created_at": now.isoformat(),
            "expires_at": (now + timedelta(seconds=self.store.ttl_seconds)).isoformat(),
        }
        session_id = self.store.put(pending)

        self.logs.append(
            "resume_upload_parsed",
            {"file_name": filename or "text_input", "text_length": len(resume_text)},
            {"session_id": session_id, "summary": summary},
            True,
            user_id
        )
        print(f"[ResumeImport] 解析完成 {session_id}: {summary}")
        return {"session_id": session_id, "summary": summary, **pending}

    def get_pending(self, session_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: 会话不存在或已过期
        """
        if is_missing(session_id):
            raise InputValidationError("session_id is required")
        pending = self.store.get(session_id)
        if pending is None:
            raise NotFoundError(f"Upload session not found or expired: {session_id}")
        return {"session_id": session_id, **pending}

    def apply_changes(self, user_id: str, changes: ProposedChanges) -> Dict[str, int]:
        """
        写入已确认的变更，各实体分别提交

        Returns:
            各部分写入的条数 {"profile", "resume", "contracts", "courses"}
        """
        updated = {"profile": 0, "resume": 0, "contracts": 0, "courses": 0}

        profile_fields = {
            key: value for key, value in changes.profile.items()
            if key in IMPORTABLE_PROFILE_FIELDS and not is_missing(value)
        }
        if profile_fields:
            if self.profiles.get_profile(user_id) is None and "full_name" not in profile_fields:
                print(f"[ResumeImport] 用户 {user_id} 无资料且缺少姓名，跳过资料更新")
            else:
                self.profiles.upsert_profile(user_id, profile_fields)
                updated["profile"] = len(profile_fields)

        resume_fields = clean_resume_data(changes.resume)
        if resume_fields:
            self.resumes.update_resume(user_id, resume_fields)
            updated["resume"] = len(resume_fields)

        today = self.clock().date()
        for experience in changes.new_experiences:
            if is_missing(experience.company) or is_missing(experience.position):
                continue
            end_date = parse_partial_date(experience.end_date)
            self.contracts.create_contract({
                "user_id": user_id,
                "employer_name": experience.company,
                "position": experience.position,
                # 薪资由用户之后补充
                "salary": 0,
                "contract_type": IMPORTED_CONTRACT_TYPE,
                "start_date": parse_partial_date(experience.start_date, today),
                "end_date": end_date,
                "status": ContractStatus.ENDED if end_date else ContractStatus.ACTIVE,
            })
            updated["contracts"] += 1

        courses = [c for c in changes.new_courses if not is_missing(c.name) and not is_missing(c.institution)]
        if courses:
            resume = self.resumes.get_resume(user_id) or self.resumes.create_resume(user_id, {})
            for course in courses:
                self.resumes.add_course(
                    resume.id,
                    course.name,
                    course.institution,
                    parse_partial_date(course.completion_date, today)
                )
                updated["courses"] += 1

        return updated

    def confirm(self, session_id: str, user_id: str, confirmed_changes: Any) -> Dict[str, Any]:
        """
        应用用户确认（可能已编辑）的变更

        Args:
            session_id: upload 返回的会话 ID
            user_id: 用户 UUID，必须与上传时一致
            confirmed_changes: ProposedChanges 结构的字典

        Returns:
            {"updated_fields": {...}, "ticket_number": "..."}

        Raises:
            InputValidationError: 缺少参数或变更结构不合法
            NotFoundError: 会话不存在、已过期或不属于该用户
        """
        if is_missing(session_id):
            raise InputValidationError("session_id is required")
        validate_user_id(user_id)
        if confirmed_changes is None:
            raise InputValidationError("confirmed_changes is required")

        pending = self.store.get(session_id)
        if pending is None or pending["user_id"] != user_id:
            raise NotFoundError(f"Upload session not found or expired: {session_id}")

        try:
            changes = ProposedChanges.model_validate(confirmed_changes)
        except ValidationError as e:
            raise InputValidationError(f"Invalid confirmed_changes: {e.errors()[0]['msg']}") from e

        updated = self.apply_changes(user_id, changes)
        self.store.delete(session_id)

        self.logs.append(
            "resume_upload_confirmed",
            {"session_id": session_id},
            {"updated_fields": updated, "applied_at": self.clock().isoformat()},
            True,
            user_id
        )
        ticket = self.tickets.open_ticket(user_id, RESUME_IMPORT_TICKET_TITLE, RESUME_IMPORT_TICKET_CATEGORY)
        print(f"[ResumeImport] 已应用 {session_id}: {updated}")
        return {"updated_fields": updated, "ticket_number": ticket.ticket_number}
