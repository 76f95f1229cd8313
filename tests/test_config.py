import logging
import os

import pytest

from mealcart import Settings, setup_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DEFAULT_DELIVERY_FEE",
        "MIN_POSTCODE_LENGTH",
        "EXPIRY_WARNING_DAYS",
        "COLLECTION_WINDOW_DAYS",
        "CART_STORAGE_URL",
        "CART_STORAGE_KEY",
        "CURRENCY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"MEALCART_{name}", raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env, tmp_path):
        settings = Settings.from_env(tmp_path / "missing.env")
        assert settings == Settings()
        assert settings.default_delivery_fee is None

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("MEALCART_DEFAULT_DELIVERY_FEE", "399")
        clean_env.setenv("MEALCART_CURRENCY", "GBP")
        clean_env.setenv("MEALCART_LOG_LEVEL", "debug")
        settings = Settings.from_env(tmp_path / "missing.env")
        assert settings.default_delivery_fee == 399
        assert settings.currency == "gbp"
        assert settings.log_level == "DEBUG"

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        env = tmp_path / ".env"
        env.write_text("MEALCART_EXPIRY_WARNING_DAYS=7\nMEALCART_CART_STORAGE_KEY=bob\n")
        try:
            settings = Settings.from_env(env)
        finally:
            os.environ.pop("MEALCART_EXPIRY_WARNING_DAYS", None)
            os.environ.pop("MEALCART_CART_STORAGE_KEY", None)
        assert settings.expiry_warning_days == 7
        assert settings.cart_storage_key == "bob"

    def test_rejects_garbage(self, clean_env, tmp_path):
        clean_env.setenv("MEALCART_MIN_POSTCODE_LENGTH", "four")
        with pytest.raises(ValueError, match="MEALCART_MIN_POSTCODE_LENGTH"):
            Settings.from_env(tmp_path / "missing.env")


class TestLogging:

    def test_level_and_quiet_libraries(self):
        setup_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        setup_logging("INFO")
