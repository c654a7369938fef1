import os
import tempfile

from contactnotes.config import Config, load_config, save_config
from contactnotes.models import SocialCircle


def test_save_and_load_config_roundtrip():
    cfg = Config(data_dir="/data/contactnotes")
    cfg.log_level = "DEBUG"
    cfg.circles.disable(SocialCircle.WORK)
    cfg.circles.move(SocialCircle.FRIENDS, 0)

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "contactnotes_config.yml")
        save_config(path, cfg)
        loaded = load_config(path)

    assert loaded.data_dir == "/data/contactnotes"
    assert loaded.log_level == "DEBUG"
    assert loaded.circles.disabled == ["Work"]
    assert loaded.circles.enabled_circles()[0] is SocialCircle.FRIENDS


def test_load_config_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "contactnotes_config.yml")
        with open(path, "w", encoding="utf-8") as handle:
            handle.write("data_dir: here\n")
        loaded = load_config(path)

    assert loaded.log_dir is None
    assert loaded.log_level == "INFO"
    assert len(loaded.circles.enabled_circles()) == len(SocialCircle)
