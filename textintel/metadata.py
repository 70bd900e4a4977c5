import tomllib
from typing import Optional
from textintel.obs import log


class MetadataUnavailable(Exception):
    pass


class MetadataSource:
    """The ``[meta]`` table of deepgram.toml, read once when the app starts."""

    def __init__(self, path: str):
        self.path = path
        self._meta: Optional[dict] = None
        self._error: Optional[str] = None
        self.load()

    def load(self) -> None:
        try:
            with open(self.path, 'rb') as fh:
                config = tomllib.load(fh)
        except FileNotFoundError:
            self._meta, self._error = None, f'{self.path} file not found'
        except (OSError, tomllib.TOMLDecodeError) as e:
            self._meta, self._error = None, f'Failed to read metadata from {self.path}: {e}'
        else:
            meta = config.get('meta')
            if isinstance(meta, dict):
                self._meta, self._error = meta, None
            else:
                self._meta, self._error = None, f'Missing [meta] section in {self.path}'
        if self._error:
            log.warning('metadata_unavailable', path=self.path, error=self._error)

    def get(self) -> dict:
        if self._meta is None:
            raise MetadataUnavailable(self._error)
        return dict(self._meta)
