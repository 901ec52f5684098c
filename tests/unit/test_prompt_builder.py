"""
Unit tests for the prompt builder.
"""

from app.models.file_change import ChangedFile, FileStatus
from app.services.prompt_builder import (
    NO_CONTENT_NOTE,
    NO_PATCH,
    SYSTEM_PROMPT,
    build_review_prompt,
    render_file_section,
)


def make_file(filename="app.py", status=FileStatus.MODIFIED, patch="@@ -1 +1 @@\n-a\n+b",
              content="b\n", language="Python"):
    return ChangedFile(
        filename=filename,
        status=status,
        additions=1,
        deletions=1,
        changes=2,
        patch=patch,
        content=content,
        language=language,
    )


def test_prompt_contains_title_and_description():
    prompt = build_review_prompt([make_file()], "Fixes the login bug", "Fix login")

    assert "**Pull Request Title:** Fix login" in prompt
    assert "**Pull Request Description:** Fixes the login bug" in prompt


def test_file_section_with_content():
    section = render_file_section(make_file())

    assert "### app.py (Python)" in section
    assert "**Status:** modified" in section
    assert "**Changes:** +1 -1" in section
    assert "```diff\n@@ -1 +1 @@\n-a\n+b\n```" in section
    assert "**Full File Content:**\n```python\nb\n\n```" in section
    assert NO_CONTENT_NOTE not in section


def test_file_section_without_content_or_patch():
    section = render_file_section(make_file(patch=None, content=None, status=FileStatus.RENAMED))

    assert f"```diff\n{NO_PATCH}\n```" in section
    assert NO_CONTENT_NOTE in section
    assert "**Full File Content:**" not in section


def test_empty_content_is_still_rendered():
    section = render_file_section(make_file(content=""))

    assert "**Full File Content:**" in section


def test_file_order_is_preserved():
    files = [make_file("z.py"), make_file("a.js", language="JavaScript"), make_file("m.go", language="Go")]

    prompt = build_review_prompt(files, "", "Order")

    assert prompt.index("### z.py") < prompt.index("### a.js") < prompt.index("### m.go")


def test_prompt_asks_for_recommendation_section():
    prompt = build_review_prompt([make_file()], "", "t")

    assert "## 🏁 Recommendation" in prompt
    assert "[APPROVE, REQUEST_CHANGES, or COMMENT with reasoning]" in prompt


def test_prompt_is_deterministic():
    files = [make_file()]

    assert build_review_prompt(files, "d", "t") == build_review_prompt(files, "d", "t")


def test_system_prompt():
    assert SYSTEM_PROMPT.startswith("You are a senior software engineer")
