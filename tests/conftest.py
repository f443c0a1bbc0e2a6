"""Shared fixtures: a small vault of Markdown notes on disk."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_note(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    write_note(
        root,
        "Деревянная коробка.md",
        "---\naliases:\n  - Wooden box\n---\n"
        "# Материалы\n\nДуб и сосна.\n\n## Размеры\n\n- Длина 40 см\n- Ширина 30 см ^size01\n",
    )
    write_note(root, "Running shoes.md", "# Running shoes\n\nSee [[Marathon plan]] and [[Деревянная коробка#Размеры]].\n")
    write_note(root, "projects/Garden.md", "Plans for [[marathon plan|the race]] and [[Greenhouse^abc]].\n")
    write_note(root, ".obsidian/ignored.md", "[[Hidden target]]\n")
    return root
