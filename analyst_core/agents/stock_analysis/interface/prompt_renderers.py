from __future__ import annotations

from langchain_core.prompts import ChatPromptTemplate


def build_analysis_chat_prompt(
    *, system_prompt: str, user_instructions: str
) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", system_prompt),
            ("user", user_instructions),
        ]
    )
