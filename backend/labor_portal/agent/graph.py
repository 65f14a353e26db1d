"""
LangGraph 工作流定义

该模块定义了对话助手的工作流：模型节点和工具节点交替执行，
直到模型不再请求工具或达到步数上限。
"""

from typing import Any, Dict

from langchain_core.messages import AIMessage, ToolMessage
from langgraph.graph import StateGraph, END

from labor_portal.agent.dispatcher import ActionDispatcher
from labor_portal.agent.prompts import format_tool_error, format_tool_result
from labor_portal.agent.state import AgentState
from labor_portal.agent.tools import build_tool_schemas, clean_tool_args
from labor_portal.config import AGENT_MAX_STEPS
from labor_portal.exceptions import LaborPortalError


def make_agent_node(llm_with_tools: Any):
    """
    创建模型节点：调用绑定了工具的模型，把回复追加到消息列表
    """

    def agent_node(state: AgentState) -> Dict[str, Any]:
        messages = list(state.get("messages", []))
        response = llm_with_tools.invoke(messages)
        return {
            "messages": messages + [response],
            "step_count": state.get("step_count", 0) + 1,
        }

    return agent_node


def make_tools_node(dispatcher: ActionDispatcher):
    """
    创建工具节点：通过分发器执行模型请求的每个工具调用
    业务异常作为失败结果回传给模型，其他异常向上抛出
    """

    def tools_node(state: AgentState) -> Dict[str, Any]:
        messages = list(state.get("messages", []))
        tools_used = list(state.get("tools_used", []))
        last_message = messages[-1]

        for tool_call in getattr(last_message, "tool_calls", None) or []:
            name = tool_call["name"]
            payload = clean_tool_args(tool_call.get("args"), state["user_id"])
            tools_used.append(name)
            try:
                content = format_tool_result(dispatcher.dispatch(name, payload))
            except LaborPortalError as e:
                print(f"[AgentGraph] 工具 {name} 失败: {e.message}")
                content = format_tool_error(e.message)
            messages.append(ToolMessage(content=content, tool_call_id=tool_call["id"], name=name))

        return {"messages": messages, "tools_used": tools_used}

    return tools_node


def make_route(max_steps: int):

    def route_after_agent(state: AgentState) -> str:
        """模型请求了工具且未达步数上限时进入工具节点"""
        last_message = state["messages"][-1]
        if isinstance(last_message, AIMessage) and last_message.tool_calls:
            if state.get("step_count", 0) < max_steps:
                return "tools_node"
            print(f"[AgentGraph] 达到步数上限 {max_steps}，停止工具调用")
        return END

    return route_after_agent


def create_agent_graph(llm: Any, dispatcher: ActionDispatcher, max_steps: int = AGENT_MAX_STEPS):
    """
    创建 Agent 工作流图

    工作流说明：
    1. agent_node (入口) - 调用模型，可能请求工具
    2. route_after_agent - 有工具调用则进入 tools_node，否则结束
    3. tools_node - 执行工具并回到 agent_node

    Args:
        llm: LangChain 聊天模型（需支持 bind_tools）
        dispatcher: 绑定当前数据库会话的动作分发器
        max_steps: agent_node 最大执行次数

    Returns:
        编译后的 LangGraph 应用
    """
    llm_with_tools = llm.bind_tools(build_tool_schemas())

    workflow = StateGraph(AgentState)

    workflow.add_node("agent_node", make_agent_node(llm_with_tools))
    workflow.add_node("tools_node", make_tools_node(dispatcher))

    workflow.set_entry_point("agent_node")

    workflow.add_conditional_edges(
        "agent_node",
        make_route(max_steps),
        {
            "tools_node": "tools_node",
            END: END
        }
    )
    workflow.add_edge("tools_node", "agent_node")

    return workflow.compile()
