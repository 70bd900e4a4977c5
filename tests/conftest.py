import os, pytest

os.environ.setdefault('DEEPGRAM_API_KEY', 'testkey')

from fastapi.testclient import TestClient
from textintel.auth import InMemoryDenylist, SessionTokenService
from textintel.config import Settings
from textintel.main import create_app
from textintel.metadata import MetadataSource

SECRET = 'test-session-secret-0123456789abcdef'

class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now
    def __call__(self) -> float:
        return self.now
    def advance(self, seconds: float) -> None:
        self.now += seconds

class FakeProxy:
    def __init__(self, results=None, error=None):
        self.results = {'summary': {'text': 'hi'}} if results is None else results
        self.error = error
        self.calls = []
    def analyze(self, source, options):
        self.calls.append((source, dict(options)))
        if self.error is not None:
            raise self.error
        return self.results

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def denylist():
    return InMemoryDenylist()

@pytest.fixture
def tokens(clock, denylist):
    return SessionTokenService(SECRET, clock=clock, denylist=denylist)

@pytest.fixture
def proxy():
    return FakeProxy()

@pytest.fixture
def metadata_file(tmp_path):
    path = tmp_path / 'deepgram.toml'
    path.write_text('[meta]\ntitle = "Text Intelligence Starter"\nlanguage = "Python"\n')
    return path

@pytest.fixture
def app(tokens, proxy, metadata_file):
    settings = Settings(api_key='testkey', session_secret=SECRET, metadata_path=str(metadata_file))
    return create_app(settings, tokens=tokens, proxy=proxy, metadata=MetadataSource(str(metadata_file)))

@pytest.fixture()
def client(app):
    return TestClient(app)

@pytest.fixture
def auth_headers(tokens):
    return {'Authorization': f'Bearer {tokens.issue()}'}
