import os, secrets
from dataclasses import dataclass
from dotenv import load_dotenv
from textintel.obs import log

load_dotenv()

DEFAULT_PORT = 8081
DEFAULT_HOST = '0.0.0.0'
DEEPGRAM_READ_URL = 'https://api.deepgram.com/v1/read'
SESSION_LIFETIME_S = 3600
PROVIDER_TIMEOUT_S = 30.0
METADATA_PATH = 'deepgram.toml'


@dataclass(frozen=True)
class Settings:
    api_key: str
    session_secret: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    read_url: str = DEEPGRAM_READ_URL
    provider_timeout_s: float = PROVIDER_TIMEOUT_S
    session_lifetime_s: int = SESSION_LIFETIME_S
    metadata_path: str = METADATA_PATH

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            api_key=load_api_key(),
            session_secret=os.getenv('SESSION_SECRET') or secrets.token_hex(32),
            host=os.getenv('HOST', DEFAULT_HOST),
            port=int(os.getenv('PORT', DEFAULT_PORT)),
            read_url=os.getenv('DEEPGRAM_READ_URL', DEEPGRAM_READ_URL),
            provider_timeout_s=float(os.getenv('PROVIDER_TIMEOUT_S', PROVIDER_TIMEOUT_S)),
            metadata_path=os.getenv('METADATA_PATH', METADATA_PATH),
        )


def load_api_key() -> str:
    api_key = os.getenv('DEEPGRAM_API_KEY', '')
    if not api_key:
        log.error(
            'api_key_missing',
            hint='create a .env file with DEEPGRAM_API_KEY=your_api_key_here or export DEEPGRAM_API_KEY',
            console='https://console.deepgram.com',
        )
        raise RuntimeError('DEEPGRAM_API_KEY is not set')
    return api_key
