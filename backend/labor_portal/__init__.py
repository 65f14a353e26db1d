"""
劳工服务门户后端
人力资源部公民门户：劳工档案、智能助手动作分发、主动事件提醒
"""

__version__ = "0.1.0"
