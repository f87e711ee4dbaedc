from devmeet.backend.config import Settings


def test_default_database_lives_in_instance_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("DEVMEET_INSTANCE_PATH", str(tmp_path))
    monkeypatch.delenv("DEVMEET_DATABASE_URL")

    assert Settings().database_url == f"sqlite:///{tmp_path / 'devmeet.db'}"


def test_instance_config_file_is_read(tmp_path, monkeypatch):
    monkeypatch.setenv("DEVMEET_INSTANCE_PATH", str(tmp_path))
    monkeypatch.delenv("DEVMEET_DATABASE_URL")
    (tmp_path / "config.toml").write_text('database_url = "sqlite:///elsewhere.db"\n')

    assert Settings().database_url == "sqlite:///elsewhere.db"
