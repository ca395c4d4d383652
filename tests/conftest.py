from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


def make_post(
    title: str = "Hello",
    date: str = "2026-01-01",
    tags: list[str] | None = None,
    featured: bool | None = None,
    excerpt: str | None = None,
    body: str = "Some *body* text.",
) -> str:
    lines = ["---", f'title: "{title}"', f'date: "{date}"']
    if tags is not None:
        lines.append("tags: [" + ", ".join(f'"{tag}"' for tag in tags) + "]")
    if featured is not None:
        lines.append(f"featured: {'true' if featured else 'false'}")
    if excerpt is not None:
        lines.append(f'excerpt: "{excerpt}"')
    lines.append("---")
    return "\n".join(lines) + "\n" + textwrap.dedent(body)


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def write_post(posts_dir: Path):
    def write(name: str, text: str | None = None, **fields) -> Path:
        path = posts_dir / name
        path.write_text(text if text is not None else make_post(**fields), encoding="utf-8")
        return path

    return write


@pytest.fixture
def sample_blog(write_post) -> None:
    write_post(
        "welcome-to-my-blog.md",
        title="Welcome to My Blog",
        date="2026-01-21",
        tags=["general", "introduction"],
        featured=True,
        excerpt="First post.",
    )
    write_post("laravel-rate-limiting.md", title="Laravel Rate Limiting", date="2026-02-03", tags=["laravel", "security"])
    write_post("sql-injection.md", title="SQL Injection 101", date="2026-02-03", tags=["security"], featured=True)
    write_post("kubernetes-basics.md", title="Kubernetes Basics", date="2025-12-30", tags=["kubernetes", "General"])
