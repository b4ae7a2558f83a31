"""LLM client, prompt loading and text-completion components."""

from techpack_agent.agents.completion import AgentCompletionService, CompletionService
from techpack_agent.agents.llm import create_chat_client
from techpack_agent.agents.prompts import load_prompt, render_prompt

__all__ = [
    "AgentCompletionService",
    "CompletionService",
    "create_chat_client",
    "load_prompt",
    "render_prompt",
]
