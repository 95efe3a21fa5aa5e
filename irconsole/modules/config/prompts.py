from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, conint, field_validator

logger = logging.getLogger("irconsole.prompts")


class VariableSpec(BaseModel):
    name: str
    required: bool = False
    default: Optional[str] = None


class PromptSpec(BaseModel):
    version: conint(ge=1)
    name: str
    role: str
    content: str
    variables: List[VariableSpec] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)

    @field_validator("role")
    @classmethod
    def role_must_be_system(cls, v: str) -> str:
        if v != "system":
            raise ValueError("role must be 'system'")
        return v


DEFAULT_PROMPTS = {
    "explain": (
        "You are a Linux security and incident-response expert. You analyse process, network, "
        "service, account, scheduled-task, firewall and startup information from a live host. "
        "Explain the result below in concise, professional language, focusing on security risks "
        "and anything abnormal.\n\n"
        "Title: {{title}}\n\n"
        "Command:\n{{command}}\n\n"
        "Output:\n{{output}}\n\n"
        "Please provide:\n"
        "1. Summary\n"
        "2. Key findings\n"
        "3. Security assessment (if applicable)\n"
        "4. Recommended actions (if applicable)"
    ),
}

DEFAULT_PROMPT = DEFAULT_PROMPTS["explain"]


def _render(content: str, values: Dict[str, str]) -> str:
    """Render {{var}} placeholders in a single pass."""
    return re.sub(r"\{\{([^}]+)\}\}", lambda m: values.get(m.group(1).strip(), m.group(0)), content)


def _load_spec(path: str) -> PromptSpec:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return PromptSpec(**data)


def _resolve_values(spec: PromptSpec, overrides: Optional[Dict[str, str]]) -> Dict[str, str]:
    overrides = overrides or {}
    resolved: Dict[str, str] = {}
    for v in spec.variables:
        if v.name in overrides:
            resolved[v.name] = overrides[v.name]
        elif v.default is not None:
            resolved[v.name] = v.default
        elif v.required:
            raise ValueError(f"Missing required prompt variable: {v.name}")
    for k, v in overrides.items():
        resolved.setdefault(k, v)
    return resolved


def _candidate_paths(role: str, filename: str) -> List[Optional[str]]:
    return [
        os.getenv(f"IRCONSOLE_{role.upper()}_PROMPT_FILE"),
        os.getenv("IRCONSOLE_PROMPT_FILE"),
        os.path.join(os.getcwd(), "prompts", filename),
        f"/etc/irconsole/prompts/{filename}",
    ]


def get_prompt(
    role: str = "explain",
    default_filename: Optional[str] = None,
    variables: Optional[Dict[str, str]] = None,
) -> str:
    """Load and render the system prompt for a role.

    Lookup order:
    - IRCONSOLE_<ROLE>_PROMPT_FILE
    - IRCONSOLE_PROMPT_FILE
    - prompts/<role>.prompt.yaml
    - /etc/irconsole/prompts/<role>.prompt.yaml
    Falls back to the built-in prompt when no file loads. Variables are
    embedded verbatim, never truncated.
    """
    filename = default_filename or f"{role}.prompt.yaml"
    for path in filter(None, _candidate_paths(role, filename)):
        if not os.path.isfile(path):
            continue
        try:
            spec = _load_spec(path)
            values = _resolve_values(spec, variables)
            return _render(spec.content, values)
        except Exception as e:  # noqa: BLE001 - a bad file must not block the next candidate
            logger.warning(f"Ignoring prompt file {path}: {e}")
            continue
    return _render(DEFAULT_PROMPTS.get(role, DEFAULT_PROMPT), variables or {})
