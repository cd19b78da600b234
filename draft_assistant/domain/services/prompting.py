# draft_assistant/domain/services/prompting.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

from collections.abc import Sequence

from draft_assistant.domain.models import ConversationMessage, PromptBundle, RetrievedPassage

GREETING_PREFILL = "Hi {{CUSTOMER_NAME}},"
CUSTOMER_NAME_PLACEHOLDER = "{{CUSTOMER_NAME}}"
CS_REP_NAME_PLACEHOLDER = "{{CS_REP_NAME}}"

FALLBACK_REPLY = (
    "Thanks for reaching out! I don't have specific information about that in our "
    "system right now. Let me look into this for you and get back to you with accurate "
    "details, or I can connect you with someone who can help right away. "
    "Would that work for you?"
)

SIGNATURE_BLOCK = f"Thanks,\n{CS_REP_NAME_PLACEHOLDER}"

SYSTEM_PROMPT = f"""You are an AI assistant helping customer service representatives draft professional email replies to customers.

<critical_rules>
- Write as if you ARE the CS rep speaking directly to the customer
- Use "I" or "we" when referring to the company/team
- Address the customer as "you"
- NEVER write numbered step-by-step instructions like "1. Do this, 2. Do that"
- NEVER use tutorial language like "To create X, follow these steps..."
- Instead, explain things conversationally: "You can do X by going to Y" or "Here's how it works..."
- Keep it friendly, helpful, and conversational
- Keep the reply concise (2-4 short paragraphs max)
- Use proper line breaks between paragraphs for readability
</critical_rules>

<anti_hallucination_rules>
CRITICAL - READ THIS CAREFULLY:
- You MUST ONLY answer questions using information from the company knowledge provided
- If the company knowledge is empty, does not contain relevant information, or the question is unrelated to company products/services, respond with:
  "{FALLBACK_REPLY}"
- NEVER make up information, prices, policies, exchange rates, or facts
- NEVER use your general knowledge to answer questions
- If you're unsure whether the knowledge base covers the question, default to saying you don't know
- It's BETTER to say "I don't know" than to provide incorrect information
</anti_hallucination_rules>

<tone_guidelines>
- Friendly and approachable (like texting a colleague, but professional)
- Empathetic - acknowledge their question/concern
- Helpful - give them what they need to know
- Conversational - not robotic or overly formal
- Brief - respect their time
</tone_guidelines>

Continue the email reply that has been started for you. The greeting "{GREETING_PREFILL}" has already been provided.

You must end your response with:

{SIGNATURE_BLOCK}

Make sure to include blank lines between paragraphs for readability."""

NO_KNOWLEDGE_INSTRUCTION = (
    "The company knowledge base does not contain information relevant to this inquiry. "
    "Draft an appropriate email reply."
)
WITH_KNOWLEDGE_INSTRUCTION = (
    "Draft an email reply to answer the customer's inquiry using the company knowledge "
    "provided above."
)


def format_history(history: Sequence[ConversationMessage]) -> str:
    """Render earlier turns oldest-first as ``[Customer]: ...`` / ``[CS Rep]: ...``."""
    lines = []
    for msg in history:
        label = "Customer" if msg.is_customer else "CS Rep"
        lines.append(f"[{label}]: {msg.content}")
    return "\n\n".join(lines)


def format_context(passages: Sequence[RetrievedPassage]) -> str:
    """Number passages from 1 in rank order; empty string when nothing was retrieved."""
    return "\n\n".join(f"[Source {i}]: {p.text or ''}" for i, p in enumerate(passages, 1))


def build_user_prompt(
    question: str,
    passages: Sequence[RetrievedPassage],
    history: Sequence[ConversationMessage] = (),
) -> str:
    """
    Assemble the user turn:

        [<conversation_history> block]      only if history is non-empty
        [<company_knowledge> block]         only if passages were retrieved
        <customer_inquiry> block
        closing instruction                 knowledge or no-knowledge variant
    """
    history_section = ""
    if history:
        history_section = (
            f"<conversation_history>\n{format_history(history)}\n</conversation_history>\n\n"
        )

    inquiry = f"<customer_inquiry>\n{question}\n</customer_inquiry>"

    if passages:
        instruction = WITH_KNOWLEDGE_INSTRUCTION
        if history:
            instruction += " Consider the conversation history to maintain context and continuity."
        knowledge = f"<company_knowledge>\n{format_context(passages)}\n</company_knowledge>\n\n"
        return f"{history_section}{knowledge}{inquiry}\n\n{instruction}"

    instruction = NO_KNOWLEDGE_INSTRUCTION
    if history:
        instruction += " Consider the conversation history to maintain context."
    return f"{history_section}{inquiry}\n\n{instruction}"


def compose_prompt(
    question: str,
    passages: Sequence[RetrievedPassage],
    history: Sequence[ConversationMessage] = (),
) -> PromptBundle:
    return PromptBundle(
        system=SYSTEM_PROMPT,
        user_prompt=build_user_prompt(question, passages, history),
        prefill=GREETING_PREFILL,
        has_knowledge=bool(passages),
    )


def assemble_draft(continuation: str) -> str:
    """Prefix the model continuation with the greeting it was seeded with.

    Placeholders stay unresolved; filling them is up to whoever displays the draft.
    """
    return f"{GREETING_PREFILL}\n\n{continuation}"


def fill_placeholders(
    text: str, customer_name: str | None = None, rep_name: str | None = None
) -> str:
    """Replace name placeholders for display. Unset names leave the placeholder as is."""
    if customer_name:
        text = text.replace(CUSTOMER_NAME_PLACEHOLDER, customer_name)
    if rep_name:
        text = text.replace(CS_REP_NAME_PLACEHOLDER, rep_name)
    return text
