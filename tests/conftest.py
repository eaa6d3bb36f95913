import pytest

from server import create_app


@pytest.fixture
def client():
    """Test client on a freshly built app"""
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()
