"""Bundled smart-typography rule set.

Registered on request (for example `markdownkit autoformat --typography`) like
any external plugin. All rules are document-wide multi-line rules.
"""

from __future__ import annotations

import re

from .base import MultiLineRule, RuleSet

TYPOGRAPHY_RULE_SET = RuleSet(
    name="smart-typography",
    description="Typography rules for professional-looking output",
    rules=(
        MultiLineRule(
            name="em-dash",
            description="Convert double hyphens between words to an em dash",
            pattern=re.compile(r"(\w)--(\w)"),
            transform=lambda match: f"{match[1]}—{match[2]}",
        ),
        MultiLineRule(
            name="arrows",
            description="Convert `->` to a right arrow",
            pattern=re.compile(r"->"),
            transform=lambda match: "→",
        ),
        MultiLineRule(
            name="trademark",
            description="Convert (TM) to the trademark symbol",
            pattern=re.compile(r"\(TM\)", re.IGNORECASE),
            transform=lambda match: "™",
        ),
        MultiLineRule(
            name="registered",
            description="Convert (R) to the registered symbol",
            pattern=re.compile(r"\(R\)", re.IGNORECASE),
            transform=lambda match: "®",
        ),
        MultiLineRule(
            name="copyright",
            description="Convert (C) to the copyright symbol",
            pattern=re.compile(r"\(C\)", re.IGNORECASE),
            transform=lambda match: "©",
        ),
    ),
)
