"""
Constants used by the evaluation engine.

Patterns and default messages live here so the rule evaluator and the
derived-value computer share one place to maintain them.
"""

import re

# local@domain.tld with no whitespace and at least one dot after the @
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

DIGIT_PATTERN = re.compile(r"[0-9]")

PASSWORD_MIN_LENGTH = 8

# Default messages, used when a rule declares none
REQUIRED_MESSAGE = "{label} is required"
MIN_LENGTH_MESSAGE = "{label} must be at least {value} characters"
MAX_LENGTH_MESSAGE = "{label} must not exceed {value} characters"
EMAIL_MESSAGE = "Please enter a valid email address"
PASSWORD_MESSAGE = "Password must be at least 8 characters and contain a number"
CUSTOM_MESSAGE = "{label} is invalid"

CONCAT_SEPARATOR = " "
CONCAT_LIST_SEPARATOR = ","

# What the renderer shows for a derived field with no value
NO_VALUE_TEXT = "No value"
