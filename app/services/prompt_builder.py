"""
Prompt Builder.

Renders the review prompt sent to the completion model. Pure functions only.
"""

from typing import List

from app.models.file_change import ChangedFile


SYSTEM_PROMPT = (
    "You are a senior software engineer and code reviewer with expertise in "
    "multiple programming languages. Provide thorough, constructive, and "
    "actionable code review feedback."
)

NO_PATCH = "No patch available"
NO_CONTENT_NOTE = "**Note:** Full file content not available, review based on diff only."

REVIEW_INSTRUCTIONS = """Please provide a comprehensive code review focusing on:

1. **Code Quality & Best Practices**
   - Code style and formatting
   - Naming conventions
   - Code organization and structure

2. **Performance & Efficiency**
   - Potential performance bottlenecks
   - Resource usage optimization
   - Algorithm efficiency

3. **Security Concerns**
   - Input validation
   - Authentication/authorization
   - Data sanitization
   - Common security vulnerabilities

4. **Maintainability**
   - Code readability
   - Documentation
   - Error handling
   - Testing considerations

5. **Logic & Functionality**
   - Potential bugs or edge cases
   - Business logic correctness
   - Error scenarios

**Format your response as follows:**

## 🎯 Overall Assessment
[Brief summary of the PR and overall code quality]

## ✅ What's Good
[Highlight positive aspects of the code]

## 🔍 Issues Found
[List specific issues with file references and line numbers when possible]

## 💡 Suggestions
[Provide specific improvement suggestions]

## 🏁 Recommendation
[APPROVE, REQUEST_CHANGES, or COMMENT with reasoning]

Keep your feedback constructive, specific, and actionable. Focus on the most important issues first."""


def render_file_section(file: ChangedFile) -> str:
    """Render the prompt section for one changed file."""
    if file.content is not None:
        content_block = (
            "**Full File Content:**\n"
            f"```{file.language.lower()}\n"
            f"{file.content}\n"
            "```"
        )
    else:
        content_block = NO_CONTENT_NOTE

    return (
        f"\n### {file.filename} ({file.language})\n"
        f"**Status:** {file.status.value}\n"
        f"**Changes:** +{file.additions} -{file.deletions}\n"
        "\n"
        "**Code Changes:**\n"
        "```diff\n"
        f"{file.patch or NO_PATCH}\n"
        "```\n"
        "\n"
        f"{content_block}\n"
    )


def build_review_prompt(files: List[ChangedFile], description: str, title: str) -> str:
    """
    Build the user prompt for a pull request review.

    Args:
        files: Collected files, in the order they should appear
        description: Pull request body
        title: Pull request title

    Returns:
        The rendered prompt
    """
    sections = "\n".join(render_file_section(f) for f in files)

    return (
        "\nYou are an expert code reviewer. Please review the following pull request "
        "and provide constructive feedback.\n"
        "\n"
        f"**Pull Request Title:** {title}\n"
        f"**Pull Request Description:** {description}\n"
        "\n"
        "**Files Changed:**\n"
        f"{sections}\n"
        "\n"
        f"{REVIEW_INSTRUCTIONS}\n"
    )
