"""Test data factories."""

from tests.factories.fanout import (
    make_business_docs,
    make_event,
    make_user_doc,
)

__all__ = ["make_business_docs", "make_event", "make_user_doc"]
