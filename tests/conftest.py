"""pytest configuration and fixtures for pyqt-fieldforms tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def surface():
    """Fresh headless surface at scale 1."""
    from pyqt_fieldforms.forms.headless_surface import HeadlessSurface
    return HeadlessSurface(ui_scale=1.0)


@pytest.fixture
def session():
    """Fresh form session."""
    from pyqt_fieldforms.services.form_session import FormSession
    return FormSession()


@pytest.fixture(autouse=True)
def reset_form_config():
    """Restore the default form configuration after each test."""
    from pyqt_fieldforms.protocols.form_config import FieldFormConfig, set_form_config
    yield
    set_form_config(FieldFormConfig())
