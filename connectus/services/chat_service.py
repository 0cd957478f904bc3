from __future__ import annotations

import logging
import re
from typing import Protocol

import openai
from openai import OpenAI

from connectus.config import Settings, settings
from connectus.errors import ExternalServiceError, ServerMisconfigured


logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't process that. Please try again."

# List markers only; decimals such as 0.01 are left alone.
_NUMBERED_ITEM_RE = re.compile(r"(?<!\d)\d+\.(?!\d)")

SYSTEM_PROMPT = """You are "ConnectUS Bot", the assistant for ConnectUS, a job and professional networking portal.
Be friendly, professional and concise. Only describe features that exist.

Platform facts:
- Accounts: register with name, e-mail and password; sign-in issues a bearer token valid for one hour.
- Profiles: bio, skills (typed in or picked up from the bio), LinkedIn URL, phone and a Solana public wallet address.
- Jobs: anyone can browse and search by title, description or skill. Posting a job needs a future deadline,
  a connected Phantom wallet that matches the profile wallet, and a {fee} SOL fee paid on Solana {network}.
  The server checks the payment on-chain before the job is published, and each transaction can pay for one job only.
- Applications: upload a PDF, DOC or DOCX resume before the deadline, one application per job. Statuses are
  submitted, reviewed, shortlisted and rejected. Posters see applicants for their own jobs and can download resumes.
- Match score: 0-100%, the share of a job's required skills found in the user's skills. Spelling variants such as
  "React", "React.js" and "reactjs" count as the same skill.
- Salaries and budgets are shown in Indian Rupees.

You can help with using the platform, career guidance, skills and technologies, resumes and interviews,
and the Web3 concepts the platform uses. Do not give financial or legal advice, do not share information
about other users, and do not claim to perform actions for the user. If you do not know something, say so.
Steer off-topic questions back to careers or the platform."""


class ChatCompleter(Protocol):
    def reply(self, message: str) -> str:
        ...


def format_numbered_lists(text: str) -> str:
    """Start each ``N.`` marker on its own line."""
    if not text or not _NUMBERED_ITEM_RE.search(text):
        return text
    return _NUMBERED_ITEM_RE.sub(lambda m: "\n" + m.group(0), text)


def build_system_prompt(cfg: Settings) -> str:
    network = "Devnet" if "devnet" in cfg.solana_rpc_url else "Mainnet"
    return SYSTEM_PROMPT.format(fee=cfg.job_posting_fee_sol, network=network)


class ChatAssistant:
    def __init__(self, client: OpenAI, *, model: str, system_prompt: str) -> None:
        self.client = client
        self.model = model
        self.system_prompt = system_prompt

    def reply(self, message: str) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": message},
                ],
            )
        except openai.APITimeoutError as exc:
            logger.warning("chat.provider_error timeout model=%s", self.model)
            raise ExternalServiceError("The chat assistant timed out. Try again.", code="chat_unavailable") from exc
        except openai.OpenAIError as exc:
            logger.warning("chat.provider_error model=%s error=%s", self.model, exc)
            raise ExternalServiceError("The chat assistant is unavailable. Try again later.", code="chat_unavailable") from exc

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        return format_numbered_lists(content) if content else FALLBACK_REPLY


def build_chat_assistant(cfg: Settings) -> ChatAssistant:
    if not cfg.llm_api_key:
        raise ServerMisconfigured("Chat assistant is not configured.", code="chat_not_configured")
    client = OpenAI(
        api_key=cfg.llm_api_key,
        base_url=cfg.llm_base_url,
        timeout=cfg.llm_timeout_seconds,
        max_retries=0,
    )
    return ChatAssistant(client, model=cfg.llm_model, system_prompt=build_system_prompt(cfg))


def get_chat_assistant() -> ChatCompleter:
    return build_chat_assistant(settings)
