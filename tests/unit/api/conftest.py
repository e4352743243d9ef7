import pytest
from starlette.testclient import TestClient

from rangekit.config.settings import Settings
from rangekit.datemath import DateMath, get_date_math
from rangekit.main import create_app


@pytest.fixture
def app():
    """Application with a UTC collaborator and test settings"""
    app = create_app(Settings(environment="test", default_resolution=100))
    app.dependency_overrides[get_date_math] = lambda: DateMath(time_zone="utc")
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
