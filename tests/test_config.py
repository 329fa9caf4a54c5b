from pathlib import Path

from ctg_record_validator.config import ValidatorConfig


class TestValidatorConfig:

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "JOBS", "DATA_ROOT", "CACHE_ENABLED", "KEYWORDS_FILE"):
            monkeypatch.delenv(f"CTG_VALIDATOR_{name}", raising=False)
        config = ValidatorConfig.from_env()
        assert config.log_level == "INFO"
        assert config.jobs == 1
        assert not config.cache_enabled
        assert config.keywords_path == Path("../closing-the-gap/KEYWORDS/KEYWORDS.json")

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CTG_VALIDATOR_DATA_ROOT", str(tmp_path))
        monkeypatch.setenv("CTG_VALIDATOR_JOBS", "0")
        monkeypatch.setenv("CTG_VALIDATOR_CACHE_ENABLED", "TRUE")
        monkeypatch.setenv("CTG_VALIDATOR_INDEX_FILE", "index/PROJECTS.json")
        config = ValidatorConfig.from_env()
        assert config.jobs == 1
        assert config.cache_enabled
        assert config.index_path == tmp_path / "index" / "PROJECTS.json"

    def test_absolute_paths_ignore_data_root(self, tmp_path):
        config = ValidatorConfig(data_root="/somewhere/else")
        assert config.resolve(str(tmp_path / "KEYWORDS.json")) == tmp_path / "KEYWORDS.json"
        assert config.template_path == Path("/somewhere/else/TEMPLATES/project.json")
