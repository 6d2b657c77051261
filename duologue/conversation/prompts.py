"""Prompt templates for the conversation drivers.

Each function renders one directive. Labels are the display names of the
sides (model ids or configured names).
"""

from __future__ import annotations


CODE_REVIEW_RUBRIC = """1. A summary of what the code does
2. Potential bugs or issues
3. Performance concerns
4. Code style and best practices suggestions
5. Security considerations if applicable"""

DEBATER_SYSTEM_PROMPT = "You are a skilled debater who argues your position clearly and persuasively."
SUMMARIZER_SYSTEM_PROMPT = "You are a helpful assistant that summarizes discussions concisely."

_CONCISE_LENGTH_INSTRUCTION = (
    "Keep your response focused and concise (2-4 paragraphs max). Get straight to the point."
)


# =============================================================================
# Code review
# =============================================================================

def code_review_prompt(code: str) -> str:
    """Independent review of a code block against the 5-point rubric."""
    return f"""You are an expert code reviewer. Review the following code and provide:
{CODE_REVIEW_RUBRIC}

Be specific and constructive. Here's the code:

```
{code}
```"""


def review_discussion_prompt(other_label: str, previous: str) -> str:
    return f"""The other AI ({other_label}) provided this code review:

{previous}

Please respond to their review:
- Do you agree or disagree with their points?
- What did they miss that you caught?
- What did they catch that you might have missed?
- Are there any points you'd like to clarify or expand on?

Keep your response focused and constructive."""


# =============================================================================
# Debate
# =============================================================================

def debate_opening_prompt(topic: str, in_favor: bool) -> str:
    position = "IN FAVOR of" if in_favor else "AGAINST"
    return f"""You are participating in a technical debate. Your position is to argue {position} the following:

{topic}

Present your strongest arguments. Be logical, cite evidence where possible, and anticipate counterarguments."""


def debate_rebuttal_prompt(previous: str) -> str:
    return f"""Your opponent argued:

{previous}

Respond to their arguments and strengthen your position. Address their specific points and provide counterarguments."""


# =============================================================================
# Collaboration
# =============================================================================

def collaboration_system_prompt(concise: bool) -> str:
    instruction = _CONCISE_LENGTH_INSTRUCTION if concise else ""
    return f"You are a collaborative problem solver. Build on ideas constructively. {instruction}".strip()


def collaboration_opening_prompt(problem: str, concise: bool) -> str:
    suffix = " Be concise and focused." if concise else ""
    return f"""We're working together on this:

{problem}

Share your thoughts on this.{suffix}"""


def collaboration_continue_prompt(previous: str, concise: bool, final_turn: bool) -> str:
    """Continuation directive; the final allowed turn asks for concluding thoughts."""
    if final_turn:
        directive = "This is the final turn. Please provide your concluding thoughts and any final recommendations."
        suffix = " Keep it brief." if concise else ""
    else:
        directive = "Build on their ideas or offer a different perspective."
        suffix = " Be concise." if concise else ""
    return f"""Your collaborator said:

{previous}

{directive}{suffix}"""


def discussion_summary_prompt(subject: str, transcript: str) -> str:
    return f"""Here's a conversation between two AIs about: "{subject}"

{transcript}

---

Provide a brief summary (3-5 bullet points) of the key takeaways and conclusions from this discussion."""


# =============================================================================
# Compaction
# =============================================================================

COMPACTION_SYSTEM_PROMPT = "You are a helpful assistant that creates concise summaries of conversations."


def compaction_prompt(transcript: str) -> str:
    return f"""Please provide a concise summary of the following conversation. Focus on:
- Key topics discussed
- Important decisions or conclusions
- Any context needed to understand the recent messages

Conversation to summarize:
{transcript}

Provide a summary in 2-4 paragraphs:"""


# =============================================================================
# Shared
# =============================================================================

def workspace_context(workspace_dir: str | None) -> str:
    if not workspace_dir:
        return ""
    return f"You are working in the project directory: {workspace_dir}. "


def compaction_context(summary: str) -> str:
    return f"Summary of the earlier conversation:\n{summary}"
