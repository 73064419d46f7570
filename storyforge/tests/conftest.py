import pytest
from fastapi.testclient import TestClient

from storyforge.main import app
from storyforge.agents.painter.painter import Painter
from storyforge.web.routes import get_writer, get_painter
from storyforge.tests.fakes import FakeWriter, make_painter


@pytest.fixture(name="writer")
def writer_fixture():
    return FakeWriter()


@pytest.fixture(name="painter")
def painter_fixture():
    return make_painter()


@pytest.fixture(name="client")
def client_fixture(writer: FakeWriter, painter: Painter):

    app.dependency_overrides[get_writer] = lambda: writer
    app.dependency_overrides[get_painter] = lambda: painter

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    app.dependency_overrides.clear()
