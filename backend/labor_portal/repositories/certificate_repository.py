"""
证书 Repository
证书一经签发不可修改，只提供创建和查询
"""

from typing import List, Optional

from sqlmodel import Session, select, col

from labor_portal.models import Certificate


class CertificateRepository:
    """
    证书数据访问对象
    """

    def __init__(self, session: Session):
        self.session = session

    def create(self, certificate: Certificate) -> Certificate:
        """
        保存新签发的证书

        Args:
            certificate: 未持久化的 Certificate 对象

        Returns:
            持久化后的 Certificate 对象
        """
        self.session.add(certificate)
        self.session.commit()
        self.session.refresh(certificate)
        return certificate

    def get_by_id(self, certificate_id: str) -> Optional[Certificate]:
        return self.session.get(Certificate, certificate_id)

    def get_by_user(self, user_id: str) -> List[Certificate]:
        """
        获取用户的所有证书，最新签发的在前

        Args:
            user_id: 用户 UUID

        Returns:
            Certificate 对象列表
        """
        statement = (
            select(Certificate)
            .where(Certificate.user_id == user_id)
            .order_by(col(Certificate.issue_date).desc())
        )
        return self.session.exec(statement).all()
