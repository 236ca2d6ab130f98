import pytest

from app.core.config import Settings
from app.models.enums import StorageBackend


class TestSettings:

    @pytest.mark.parametrize("raw", ["csv", " CSV "])
    def test_storage_backend_parsing(self, raw):
        assert Settings(storage_backend=raw).get_storage_backend() is StorageBackend.CSV

    def test_unknown_storage_backend(self):
        with pytest.raises(ValueError, match="Unsupported storage backend"):
            Settings(storage_backend="postgres").get_storage_backend()

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('["http://a.test", "http://b.test"]', ["http://a.test", "http://b.test"]),
            ("http://a.test, http://b.test", ["http://a.test", "http://b.test"]),
            (["*"], ["*"]),
        ],
    )
    def test_cors_origins(self, raw, expected):
        assert Settings(cors_origins=raw).get_cors_origins_list() == expected
