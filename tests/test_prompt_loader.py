"""Tests for parley.prompts: system prompt rendering."""

from __future__ import annotations

import pytest

from parley.prompts import build_system_prompt, render_prompt
from parley.schemas.config import AssistantSettings


class TestRenderPrompt:
    def test_missing_template(self):
        with pytest.raises(FileNotFoundError):
            render_prompt("does_not_exist")

    def test_product_name_injected(self):
        prompt = render_prompt("assistant", product_name="Acme", output_schema="{}")
        assert "helpful AI assistant for Acme" in prompt


class TestBuildSystemPrompt:
    def test_contains_output_contract(self):
        prompt = build_system_prompt(AssistantSettings(product_name="Acme"))
        assert "Acme" in prompt
        for key in ("linksObj", "needsHelpObj", "isProspectObj", "followUpQuestions"):
            assert f'"{key}"' in prompt
