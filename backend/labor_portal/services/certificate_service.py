"""
证书服务

证书正文是 (用户资料, 合同, 签发日期) 的纯函数：
正文在内存中拼装完成后才写库，同一输入重复生成只有签发日期不同。
"""

from datetime import date, datetime, timedelta
from typing import Callable, List, Tuple

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, DomainStateError
from labor_portal.models import (
    Certificate,
    CertificateType,
    EmploymentContract,
    UserProfile,
    utc_now,
)
from labor_portal.repositories import CertificateRepository, ContractRepository, ProfileRepository


MINISTRY_NAME = "وزارة الموارد البشرية والتنمية الاجتماعية"
LICENSE_VALIDITY_DAYS = 365


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_salary(value: float) -> str:
    return f"{value:,.2f}"


def license_number(contract: EmploymentContract, issue_date: date) -> str:
    """由合同 ID 和签发日期确定的许可证编号"""
    return f"LIC-{issue_date:%Y%m%d}-{contract.id[:8].upper()}"


def service_duration(start_date: date, issue_date: date) -> Tuple[int, int]:
    """服务年限：(年, 月)，月数取不足一年的剩余天数，最多 11"""
    days = max((issue_date - start_date).days, 0)
    return days // 365, min((days % 365) // 30, 11)


def compose_salary_definition(profile: UserProfile, contract: EmploymentContract, issue_date: date) -> str:
    lines = [
        "تعريف براتب",
        "",
        "بسم الله الرحمن الرحيم",
        "",
        "إلى من يهمه الأمر",
        "",
        "السلام عليكم ورحمة الله وبركاته،",
        "",
        f"نفيد بأن السيد/ة: {profile.full_name}",
        f"يعمل/تعمل لدى: {contract.employer_name}",
        f"في وظيفة: {contract.position}",
        f"براتب شهري قدره: {format_salary(contract.salary)} ريال سعودي",
        "",
        f"تاريخ بدء العمل: {format_date(contract.start_date)}",
        f"نوع العقد: {contract.contract_type or 'غير محدد'}",
        "",
        "وقد أعطي هذا التعريف بناءً على طلبه/ا دون أدنى مسؤولية علينا.",
        "",
        "والله الموفق،",
        "",
        f"تاريخ الإصدار: {format_date(issue_date)}",
    ]
    return "\n".join(lines)


def compose_service_certificate(profile: UserProfile, contract: EmploymentContract, issue_date: date) -> str:
    years, months = service_duration(contract.start_date, issue_date)
    lines = [
        "شهادة خبرة",
        "",
        "بسم الله الرحمن الرحيم",
        "",
        "إلى من يهمه الأمر",
        "",
        "السلام عليكم ورحمة الله وبركاته،",
        "",
        f"نشهد بأن السيد/ة: {profile.full_name}",
        f"عمل/ت لدينا في: {contract.employer_name}",
        f"في وظيفة: {contract.position}",
        "",
        f"فترة العمل: من {format_date(contract.start_date)} إلى {format_date(issue_date)}",
        f"إجمالي مدة الخدمة: {years} سنة و {months} شهر",
        "",
        "وقد أظهر/ت خلال فترة عمله/ا الكفاءة والالتزام والجدية في العمل.",
        "",
        "نتمنى له/ا التوفيق في مسيرته/ا المهنية.",
        "",
        "والله الموفق،",
        "",
        f"تاريخ الإصدار: {format_date(issue_date)}",
    ]
    return "\n".join(lines)


def compose_labor_license(profile: UserProfile, contract: EmploymentContract, issue_date: date) -> str:
    expiry_date = issue_date + timedelta(days=LICENSE_VALIDITY_DAYS)
    lines = [
        "رخصة عمل",
        "",
        MINISTRY_NAME,
        "المملكة العربية السعودية",
        "",
        f"رقم الرخصة: {license_number(contract, issue_date)}",
        "",
        f"الاسم: {profile.full_name}",
        f"المنشأة: {contract.employer_name}",
        f"المهنة: {contract.position}",
        "",
        f"تاريخ الإصدار: {format_date(issue_date)}",
        f"تاريخ الانتهاء: {format_date(expiry_date)}",
        "",
        "هذه الرخصة صالحة لمدة سنة واحدة من تاريخ الإصدار.",
        "",
        f"مع تحيات {MINISTRY_NAME}",
    ]
    return "\n".join(lines)


COMPOSERS = {
    CertificateType.SALARY_DEFINITION: compose_salary_definition,
    CertificateType.SERVICE_CERTIFICATE: compose_service_certificate,
    CertificateType.LABOR_LICENSE: compose_labor_license,
}


def compose_certificate(
    certificate_type: CertificateType,
    profile: UserProfile,
    contract: EmploymentContract,
    issue_date: date
) -> str:
    """
    拼装证书正文

    Args:
        certificate_type: 证书类型
        profile: 用户资料
        contract: 作为数据源的 active 合同
        issue_date: 签发日期

    Returns:
        阿拉伯语证书正文
    """
    return COMPOSERS[certificate_type](profile, contract, issue_date)


class CertificateService:
    """
    证书服务：读取用户资料和最近创建的 active 合同，拼装正文后签发
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        """
        Args:
            session: SQLModel 数据库会话
            clock: 返回当前 UTC 时间的函数，测试时可替换
        """
        self.repo = CertificateRepository(session)
        self.contract_repo = ContractRepository(session)
        self.profile_repo = ProfileRepository(session)
        self.clock = clock

    def get_certificates(self, user_id: str) -> List[Certificate]:
        return self.repo.get_by_user(user_id)

    def _load_sources(self, user_id: str) -> Tuple[UserProfile, EmploymentContract]:
        profile = self.profile_repo.get_by_user_id(user_id)
        if profile is None:
            raise DomainStateError("User profile not found")

        contracts = self.contract_repo.get_active_by_user(user_id)
        if not contracts:
            raise DomainStateError("Active contract not found")
        if len(contracts) > 1:
            print(f"[CertificateService] 警告: 用户 {user_id} 有 {len(contracts)} 份 active 合同，使用最近创建的 {contracts[0].id}")
        return profile, contracts[0]

    def generate(self, user_id: str, certificate_type) -> Certificate:
        """
        签发证书

        Args:
            user_id: 用户 UUID
            certificate_type: CertificateType 或其字符串值

        Returns:
            新签发的 Certificate 对象

        Raises:
            InputValidationError: 证书类型不合法
            DomainStateError: 缺少用户资料或 active 合同
        """
        try:
            certificate_type = CertificateType(certificate_type)
        except ValueError:
            raise InputValidationError(f"Invalid certificate_type: {certificate_type}")

        profile, contract = self._load_sources(user_id)
        issued_at = self.clock()
        content = compose_certificate(certificate_type, profile, contract, issued_at.date())

        certificate = self.repo.create(Certificate(
            user_id=user_id,
            certificate_type=certificate_type,
            content=content,
            issue_date=issued_at
        ))
        print(f"[CertificateService] 签发 {certificate_type.value}: {certificate.id}")
        return certificate

    def generate_salary_definition(self, user_id: str) -> Certificate:
        return self.generate(user_id, CertificateType.SALARY_DEFINITION)

    def generate_service_certificate(self, user_id: str) -> Certificate:
        return self.generate(user_id, CertificateType.SERVICE_CERTIFICATE)

    def generate_labor_license(self, user_id: str) -> Certificate:
        return self.generate(user_id, CertificateType.LABOR_LICENSE)
