from docbatch import credentials
from docbatch.config import settings


def test_save_load_and_clear(monkeypatch, tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    monkeypatch.setattr(settings, "CREDENTIALS_PATH", str(path))
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)

    assert credentials.load_api_key() == ""
    credentials.save_api_key("secret-key")
    assert path.exists()
    assert credentials.load_api_key() == "secret-key"
    credentials.save_api_key("")
    assert not path.exists()


def test_falls_back_to_environment_setting(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "CREDENTIALS_PATH", str(tmp_path / "none.json"))
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "from-env")
    assert credentials.load_api_key() == "from-env"


def test_corrupt_file_counts_as_no_key(monkeypatch, tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")
    monkeypatch.setattr(settings, "CREDENTIALS_PATH", str(path))
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    assert credentials.load_api_key() == ""


def test_corrupt_file_falls_back_to_environment_setting(monkeypatch, tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text('["not", "an", "object"]')
    monkeypatch.setattr(settings, "CREDENTIALS_PATH", str(path))
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "from-env")
    assert credentials.load_api_key() == "from-env"


def test_saving_replaces_a_corrupt_file(monkeypatch, tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("garbage")
    monkeypatch.setattr(settings, "CREDENTIALS_PATH", str(path))
    credentials.save_api_key("fresh-key")
    assert credentials.load_api_key() == "fresh-key"
