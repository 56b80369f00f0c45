"""Shared test fixtures for cqc."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

import pytest

from cqc.rules.base import RuleConfig, Severity

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _make_config(
    rule_id: str,
    *,
    severity: Severity = Severity.MEDIUM,
    category: str = "maintainability",
    enabled: bool = True,
    **custom: str,
) -> RuleConfig:
    return RuleConfig(
        id=rule_id,
        name=rule_id,
        severity=severity,
        category=category,
        description=f"{rule_id} description",
        enabled=enabled,
        custom=MappingProxyType(dict(custom)),
    )


@pytest.fixture()
def rule_config() -> Callable[..., RuleConfig]:
    """Factory for rule configurations: ``rule_config("java-system-out", max_lines="5")``."""
    return _make_config


@pytest.fixture()
def sample_project(tmp_path: Path) -> Path:
    """Create a small mixed-language project for end-to-end scans."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "UserService.java").write_text(
        "package com.example.user;\n"
        "\n"
        "import org.springframework.stereotype.Service;\n"
        "\n"
        "@Service\n"
        "public class UserService {\n"
        "    public void createAndNotify(User u) {\n"
        "        userRepository.save(u);\n"
        "        notificationClient.send(u);\n"
        "        System.out.println(\"created\");\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "app.js").write_text(
        "function render(el, html) {\n"
        "    el.innerHTML = html;\n"
        "    console.log('rendered');\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "style.css").write_text(
        ".card { color: red; }\n",
        encoding="utf-8",
    )
    (src / "notes.txt").write_text("not analyzed\n", encoding="utf-8")
    vendor = tmp_path / "node_modules" / "lib"
    vendor.mkdir(parents=True)
    (vendor / "index.js").write_text("var x = 1;\n", encoding="utf-8")
    return tmp_path
