"""Built-in formatting rules.

The order of `DEFAULT_RULES` is the registration order, so it is also the
precedence order: within one line pass the first matching rule wins. The
numbered-section rule is deliberately registered before the ordered-list rule,
so `1. Setup` becomes an H3 heading rather than a list item.

Rules that emit headings, lists, or labels are flagged `structural`. The
draft structure pass skips them and relies on its own detection instead.
"""

from __future__ import annotations

import re

from .base import AnyRule, ContextualRule, FirstLineRule, LineRule, MultiLineRule

_COMMAND_PATTERN = (
    r"^(make\s+\w+"
    r"|go\s+mod\s+\w+"
    r"|npm\s+(?:install|run|test|build)"
    r"|yarn\s+(?:install|add|test|build)"
    r"|pnpm\s+(?:install|add|test|build)"
    r"|git\s+(?:clone|pull|push|commit))$"
)

DEFAULT_RULES: tuple[AnyRule, ...] = (
    LineRule(
        name="numbered-sections",
        description="Convert numbered items to H3",
        pattern=re.compile(r"^(\d+)\.\s+(.+)$"),
        transform=lambda match: f"### {match[1]}. {match[2]}",
        structural=True,
    ),
    LineRule(
        name="emoji-section-headers",
        description="Convert lines starting with a section emoji to H2",
        pattern=re.compile(r"^((?:🚨|⚠️?|💡|🔧|📋|🎯|🏗️?)\s+)(.+)$"),
        transform=lambda match: f"## {match[1]}{match[2]}",
    ),
    LineRule(
        name="colon-labels",
        description="Bold well-known review labels (Issue:, Fix:, ...)",
        pattern=re.compile(
            r"^(Issue|Impact|Fix|Gap|Recommendation|Enhancement|Security Risk):\s*(.*)$"
        ),
        transform=lambda match: f"**{match[1]}:** {match[2]}".rstrip(),
        structural=True,
    ),
    FirstLineRule(
        name="first-line-title",
        description="Convert first non-empty line to H1",
        pattern=re.compile(r"^([^#].+)$"),
        transform=lambda match: f"# {match[1]}",
    ),
    MultiLineRule(
        name="multiple-blank-lines",
        description="Collapse multiple blank lines to one",
        pattern=re.compile(r"\n{3,}"),
        transform=lambda match: "\n\n",
    ),
    LineRule(
        name="ordered-lists",
        description="Normalize ordered list spacing",
        pattern=re.compile(r"^(\d+)\.\s+(.+)$"),
        transform=lambda match: f"{match[1]}. {match[2]}",
        skip_if_already_converted=True,
        structural=True,
    ),
    LineRule(
        name="unordered-lists",
        description="Normalize unordered list markers to `-`",
        pattern=re.compile(r"^[-*]\s+(.+)$"),
        transform=lambda match: f"- {match[1]}",
        structural=True,
    ),
    LineRule(
        name="priority-labels",
        description="Bold priority level labels",
        pattern=re.compile(
            r"^(IMMEDIATE|HIGH PRIORITY|MEDIUM PRIORITY|LOW PRIORITY)(\s*-\s*.+):$"
        ),
        transform=lambda match: f"**{match[1]}**{match[2]}:",
    ),
    LineRule(
        name="command-inline-code",
        description="Wrap bare shell commands in inline code",
        pattern=re.compile(_COMMAND_PATTERN),
        transform=lambda match: f"`{match[0]}`",
    ),
    ContextualRule(
        name="list-items-after-colon",
        description="Convert short capitalized lines after a colon line to list items",
        pattern=re.compile(r"^([A-Z][a-z][\w\s]+(?:\([^)]+\))?)$"),
        transform=lambda match: f"- {match[1]}",
        structural=True,
    ),
)
