"""
证书服务单元测试
正文拼装是纯函数；签发依赖用户资料和最近创建的 active 合同
"""

from datetime import date, timedelta

import pytest

from labor_portal.exceptions import DomainStateError, InputValidationError
from labor_portal.models import CertificateType, ContractStatus, EmploymentContract
from labor_portal.services.certificate_service import (
    CertificateService,
    compose_certificate,
    format_date,
    license_number,
    service_duration,
)


ISSUE_DATE = date(2025, 3, 10)


class TestComposeCertificate:
    """测试正文拼装"""

    @pytest.mark.parametrize("certificate_type", list(CertificateType))
    def test_compose_is_pure(self, test_profile, test_contract, certificate_type):
        """测试同一输入得到同一正文"""
        first = compose_certificate(certificate_type, test_profile, test_contract, ISSUE_DATE)
        second = compose_certificate(certificate_type, test_profile, test_contract, ISSUE_DATE)
        assert first == second

    def test_salary_definition_content(self, test_profile, test_contract):
        content = compose_certificate(CertificateType.SALARY_DEFINITION, test_profile, test_contract, ISSUE_DATE)

        assert "محمد عبدالله" in content
        assert "شركة الرياض للتقنية" in content
        assert "12,500.00" in content
        assert "2020-01-15" in content

    def test_only_dates_differ(self, test_profile, test_contract):
        """测试不同签发日期只影响日期文本"""
        later = ISSUE_DATE + timedelta(days=1)
        first = compose_certificate(CertificateType.SALARY_DEFINITION, test_profile, test_contract, ISSUE_DATE)
        second = compose_certificate(CertificateType.SALARY_DEFINITION, test_profile, test_contract, later)

        assert first != second
        assert first.replace(format_date(ISSUE_DATE), "") == second.replace(format_date(later), "")

    def test_license_number_is_deterministic(self, test_contract):
        number = license_number(test_contract, ISSUE_DATE)

        assert number == f"LIC-20250310-{test_contract.id[:8].upper()}"
        assert number == license_number(test_contract, ISSUE_DATE)

    def test_labor_license_expiry(self, test_profile, test_contract):
        content = compose_certificate(CertificateType.LABOR_LICENSE, test_profile, test_contract, ISSUE_DATE)
        assert "2026-03-10" in content

    def test_service_duration(self):
        years, months = service_duration(date(2020, 1, 15), ISSUE_DATE)
        assert years == 5
        assert months == 1

    @pytest.mark.parametrize("days, expected", [
        (359, (0, 11)),
        (362, (0, 11)),
        (364, (0, 11)),
        (365, (1, 0)),
        (395, (1, 1)),
    ])
    def test_service_duration_under_full_year(self, days, expected):
        """测试不足整年的月数取剩余天数"""
        assert service_duration(ISSUE_DATE - timedelta(days=days), ISSUE_DATE) == expected

    def test_service_duration_never_negative(self):
        assert service_duration(date(2030, 1, 1), ISSUE_DATE) == (0, 0)


class TestCertificateService:
    """测试证书签发"""

    def test_generate_each_type(self, test_db_session, test_profile, test_contract, fixed_clock, user_id):
        service = CertificateService(test_db_session, clock=fixed_clock)

        salary = service.generate_salary_definition(user_id)
        experience = service.generate_service_certificate(user_id)
        license_ = service.generate_labor_license(user_id)

        assert salary.certificate_type == CertificateType.SALARY_DEFINITION
        assert experience.certificate_type == CertificateType.SERVICE_CERTIFICATE
        assert license_.certificate_type == CertificateType.LABOR_LICENSE
        assert len(service.get_certificates(user_id)) == 3

    def test_generate_from_string_type(self, test_db_session, test_profile, test_contract, fixed_clock, user_id):
        certificate = CertificateService(test_db_session, clock=fixed_clock).generate(user_id, "labor_license")
        assert license_number(test_contract, ISSUE_DATE) in certificate.content

    def test_invalid_type(self, test_db_session, test_profile, test_contract, user_id):
        with pytest.raises(InputValidationError):
            CertificateService(test_db_session).generate(user_id, "birth_certificate")

    def test_missing_profile(self, test_db_session, test_contract, user_id):
        """测试缺少用户资料时不写入证书"""
        service = CertificateService(test_db_session)
        with pytest.raises(DomainStateError, match="profile"):
            service.generate_salary_definition(user_id)
        assert service.get_certificates(user_id) == []

    def test_missing_active_contract(self, test_db_session, test_profile, test_contract, user_id):
        test_contract.status = ContractStatus.ENDED
        test_db_session.add(test_contract)
        test_db_session.commit()

        with pytest.raises(DomainStateError, match="Active contract"):
            CertificateService(test_db_session).generate_salary_definition(user_id)

    def test_uses_latest_active_contract(self, test_db_session, test_profile, test_contract, fixed_clock, fixed_now, user_id):
        """测试多份 active 合同时使用最近创建的合同"""
        test_db_session.add(EmploymentContract(
            user_id=user_id,
            employer_name="شركة الخليج للطاقة",
            position="مدير مشاريع",
            salary=18000,
            start_date=date(2024, 2, 1),
            created_at=fixed_now
        ))
        test_db_session.commit()

        certificate = CertificateService(test_db_session, clock=fixed_clock).generate_salary_definition(user_id)
        assert "شركة الخليج للطاقة" in certificate.content
        assert "شركة الرياض للتقنية" not in certificate.content

    def test_same_inputs_same_content(self, test_db_session, test_profile, test_contract, fixed_clock, user_id):
        """测试同一天重复签发正文一致"""
        service = CertificateService(test_db_session, clock=fixed_clock)
        first = service.generate_service_certificate(user_id)
        second = service.generate_service_certificate(user_id)

        assert first.id != second.id
        assert first.content == second.content
