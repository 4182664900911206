"""
Service layer for the form engine.

Cross-frame UI state, scope tokens, change notification and enum-keyed
dispatch.
"""

from .enum_dispatch_service import EnumDispatchService
from .scope_token_service import ScopeTokenService
from .form_session import FormSession, get_default_session
from .change_notifier import ChangeNotifier

__all__ = [
    "EnumDispatchService",
    "ScopeTokenService",
    "FormSession",
    "get_default_session",
    "ChangeNotifier",
]
