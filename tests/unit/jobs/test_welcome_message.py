"""Tests for the welcome mail body."""

import pytest

from staffdesk.core.mail import build_welcome_message
from staffdesk.modules.users.models import User


pytestmark = pytest.mark.unit


def test_plain_text_body():
    message = build_welcome_message(User(name="Grace", email="grace@example.com"))
    text = message.get_body(preferencelist=("plain",)).get_content()

    assert "Welcome, Grace!" in text
    assert "Open Dashboard: http://localhost:8000/dashboard" in text
    assert "contact support" in text
    assert message["From"] == "Staff Desk <hello@example.com>"


def test_html_alternative_escapes_name():
    message = build_welcome_message(User(name="<script>", email="x@example.com"))
    html = message.get_body(preferencelist=("html",)).get_content()

    assert "&lt;script&gt;" in html
    assert "<script>" not in html
