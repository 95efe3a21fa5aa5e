"""Tests for the YAML prompt loader."""

import os
import sys
import textwrap

import pytest
from pydantic import ValidationError

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irconsole.modules.config.prompts import PromptSpec, get_prompt


@pytest.fixture
def isolated_prompts(tmp_path, monkeypatch):
    """Run with no prompt files reachable except those a test writes."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("IRCONSOLE_EXPLAIN_PROMPT_FILE", raising=False)
    monkeypatch.delenv("IRCONSOLE_PROMPT_FILE", raising=False)
    return tmp_path


def write_prompt(path, content, variables=""):
    path.write_text(
        textwrap.dedent(
            f"""\
            version: 1
            name: explain
            role: system
            content: "{content}"
            """
        )
        + variables
    )
    return path


def test_builtin_prompt(isolated_prompts):
    prompt = get_prompt("explain", variables={"title": "Ping - 8.8.8.8", "command": "ping -c 4 8.8.8.8", "output": "4 received"})

    assert "Ping - 8.8.8.8" in prompt
    assert "ping -c 4 8.8.8.8" in prompt
    assert "4 received" in prompt
    assert "Security assessment" in prompt
    assert "{{" not in prompt


def test_project_prompt_file(isolated_prompts):
    (isolated_prompts / "prompts").mkdir()
    write_prompt(isolated_prompts / "prompts" / "explain.prompt.yaml", "Explain {{title}}: {{output}}")

    assert get_prompt("explain", variables={"title": "T", "output": "O"}) == "Explain T: O"


def test_env_file_wins(isolated_prompts, monkeypatch):
    (isolated_prompts / "prompts").mkdir()
    write_prompt(isolated_prompts / "prompts" / "explain.prompt.yaml", "project")
    custom = write_prompt(isolated_prompts / "custom.yaml", "custom {{title}}")
    monkeypatch.setenv("IRCONSOLE_EXPLAIN_PROMPT_FILE", str(custom))

    assert get_prompt("explain", variables={"title": "T"}) == "custom T"


def test_missing_required_variable_falls_back(isolated_prompts, monkeypatch):
    custom = write_prompt(
        isolated_prompts / "custom.yaml",
        "custom {{host}}",
        variables="variables:\n  - name: host\n    required: true\n",
    )
    monkeypatch.setenv("IRCONSOLE_PROMPT_FILE", str(custom))

    prompt = get_prompt("explain", variables={"title": "T", "output": "O"})

    assert prompt.startswith("You are a Linux security")


def test_values_are_not_rendered_twice(isolated_prompts):
    prompt = get_prompt("explain", variables={"title": "T", "command": "c", "output": "literal {{title}}"})

    assert "literal {{title}}" in prompt


def test_role_must_be_system():
    with pytest.raises(ValidationError):
        PromptSpec(version=1, name="x", role="user", content="hi")
