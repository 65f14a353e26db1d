"""
数据库初始化脚本
负责创建数据库表结构和劳动法规参考数据
"""

from typing import List, Dict

from sqlmodel import SQLModel, Session, create_engine, select

from labor_portal.config import get_database_url
# 导入模型包以便所有表注册到 SQLModel.metadata
from labor_portal import models  # noqa: F401
from labor_portal.models import WorkRegulation


# 默认法规条目：只读参考数据
DEFAULT_REGULATIONS: List[Dict[str, str]] = [
    {
        "title": "ساعات العمل",
        "category": "ساعات العمل",
        "description": "الحد الأقصى لساعات العمل اليومية والأسبوعية",
        "content": "لا يجوز تشغيل العامل أكثر من ثماني ساعات في اليوم أو ثمان وأربعين ساعة في الأسبوع، وتخفض إلى ست ساعات يومياً في شهر رمضان للمسلمين.",
    },
    {
        "title": "الإجازة السنوية",
        "category": "الإجازات",
        "description": "مدة الإجازة السنوية المدفوعة الأجر",
        "content": "يستحق العامل إجازة سنوية لا تقل مدتها عن واحد وعشرين يوماً، تزاد إلى ثلاثين يوماً إذا أمضى العامل في خدمة صاحب العمل خمس سنوات متصلة.",
    },
    {
        "title": "مكافأة نهاية الخدمة",
        "category": "نهاية الخدمة",
        "description": "احتساب مكافأة نهاية الخدمة",
        "content": "يستحق العامل مكافأة عن مدة خدمته تحسب على أساس أجر نصف شهر عن كل سنة من السنوات الخمس الأولى، وأجر شهر عن كل سنة من السنوات التالية.",
    },
    {
        "title": "فترة التجربة",
        "category": "العقود",
        "description": "مدة فترة التجربة في عقد العمل",
        "content": "لا يجوز أن تزيد فترة التجربة على تسعين يوماً، ويجوز باتفاق مكتوب تمديدها على ألا تزيد على مائة وثمانين يوماً.",
    },
    {
        "title": "إنهاء عقد العمل",
        "category": "العقود",
        "description": "فترة الإشعار عند إنهاء العقد غير محدد المدة",
        "content": "إذا كان العقد غير محدد المدة جاز لأي من طرفيه إنهاؤه بناءً على سبب مشروع بموجب إشعار يوجه إلى الطرف الآخر كتابة قبل الإنهاء بمدة لا تقل عن ستين يوماً.",
    },
]


def get_engine():
    """
    创建并返回数据库引擎
    """
    database_url = get_database_url()
    connect_args = {}
    # SQLite 特有配置：允许跨线程使用连接
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    engine = create_engine(
        database_url,
        echo=False,  # 设置为 True 可查看 SQL 语句
        connect_args=connect_args
    )
    return engine


def create_tables(engine) -> None:
    """
    创建所有数据库表
    SQLModel 会自动根据模型创建表结构
    """
    SQLModel.metadata.create_all(engine)
    print(f"[InitDB] Database tables created successfully at {engine.url}")


def create_default_regulations(session: Session) -> int:
    """
    写入默认劳动法规
    按标题去重，已存在的条目跳过

    Returns:
        新写入的条目数
    """
    created_count = 0
    for item in DEFAULT_REGULATIONS:
        statement = select(WorkRegulation).where(WorkRegulation.title == item["title"])
        if session.exec(statement).first() is None:
            session.add(WorkRegulation(**item))
            created_count += 1

    if created_count > 0:
        session.commit()
        print(f"[InitDB] Created {created_count} work regulations")
    else:
        print("[InitDB] Work regulations already exist")
    return created_count


def create_default_data(session: Session) -> None:
    """
    创建所有默认数据
    目前只有法规参考数据，用户档案由用户首次访问时创建
    """
    print("\n=== Creating default data ===")
    create_default_regulations(session)
    print("=== Default data creation completed ===\n")


def init_db() -> None:
    """
    完整的数据库初始化流程
    1. 创建数据库引擎
    2. 创建所有表结构
    3. 创建默认数据
    """
    print("\n=== Initializing database ===")

    engine = get_engine()
    create_tables(engine)

    with Session(engine) as session:
        create_default_data(session)

    print("=== Database initialization completed ===\n")


if __name__ == "__main__":
    # 直接运行此脚本时，执行数据库初始化
    init_db()
