"""
Description:
This module contains precompiled regex patterns used to clean model output
before it is decoded or shown to the user.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.
"""

import re

# Compile regex patterns once for better performance
REGEX_PATTERNS = {
    'think_block': re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE),
    'think_tag': re.compile(r"</?think[^>]*>", re.IGNORECASE),
    'code_fence': re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE),
    'markdown_bold': re.compile(r"\*\*"),
    'control_chars': re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]"),
}

# Phrases that only appear in a response when the model repeats its instructions
LEAK_PATTERNS = [
    r"<core_identity>",
    r"<output_format>",
    r"<field_guide>",
    r"Return ONLY valid JSON",
    r"expert career coach and resume reviewer",
    r"You are an AI interview coach",
]

SUSPICIOUS_PATTERNS = [
    r"I am an? (?:AI|language model) assistant",
    r"my instructions (?:are|say)",
    r"according to (?:my|the) (?:prompt|system prompt|instructions)",
    r"as per (?:my|the) system",
    r"based on (?:my|the) (?:system|prompt) instructions",
]
