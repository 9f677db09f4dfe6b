import logging
import os

import pytest

from promptx.config.settings import ContextSettings
from promptx.context.message import Message
from promptx.context.window import ContextWindowManager, reset_context_window_manager


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Isolate tests from PROMPTX_* variables, the shared manager and CLI logging."""
    for name in list(os.environ):
        if name.upper().startswith("PROMPTX_"):
            monkeypatch.delenv(name, raising=False)
    reset_context_window_manager()
    yield
    reset_context_window_manager()
    promptx_logger = logging.getLogger("promptx")
    for handler in list(promptx_logger.handlers):
        promptx_logger.removeHandler(handler)
    promptx_logger.propagate = True
    promptx_logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings():
    return ContextSettings(_env_file=None)


@pytest.fixture
def manager(settings):
    return ContextWindowManager(settings=settings)


@pytest.fixture
def system_prompt():
    return Message.system("You are a helpful assistant.")


@pytest.fixture
def conversation_factory():
    """Alternating user/assistant messages, each padded with filler words."""

    def build(count, filler_words=0):
        messages = []
        for i in range(count):
            content = f"Tell me about topic {i}. " + "word " * filler_words
            if i % 2 == 0:
                messages.append(Message.user(content))
            else:
                messages.append(Message.assistant(content))
        return messages

    return build
