"""
Description:
Strips markdown bold markers from model-authored text before it is shown.

Arguments:
- text: Text produced by the model.

Returns:
- The text without any `**` markers.

Dependencies:
- career_coach.constants.regex_patterns: For the precompiled pattern.
"""
from typing import Optional

from career_coach.constants.regex_patterns import REGEX_PATTERNS


def clean_markdown(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return REGEX_PATTERNS['markdown_bold'].sub('', text)
