import os
import tempfile

from contactnotes.flags import FlagStore
from contactnotes.models import MigrationState


def test_flags_default_to_false():
    flags = FlagStore()
    assert flags.get_bool("migratedLegacyCheckInsToNotes_v1") is False


def test_flags_persist_across_instances():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "migration_state.yml")
        FlagStore(path).set_bool("normalizedContactDefaults_v2", True)

        reloaded = FlagStore(path)

    assert reloaded.get_bool("normalizedContactDefaults_v2") is True


def test_state_roundtrip():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "migration_state.yml")
        FlagStore(path).save_state(MigrationState().with_done("step_v1"))

        state = FlagStore(path).load_state()

    assert state.is_done("step_v1")
    assert not state.is_done("step_v2")


def test_non_mapping_flags_file_starts_empty():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "migration_state.yml")
        with open(path, "w", encoding="utf-8") as handle:
            handle.write("- just\n- a list\n")
        flags = FlagStore(path)

    assert flags.load_state().completed == {}


def test_torn_flags_file_starts_empty_and_is_rewritten():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "migration_state.yml")
        with open(path, "w", encoding="utf-8") as handle:
            handle.write("migratedLegacyCheckInsToNotes_v1: true\nnormalized: tr: ue")
        flags = FlagStore(path)
        assert flags.get_bool("migratedLegacyCheckInsToNotes_v1") is False

        flags.set_bool("migratedLegacyCheckInsToNotes_v1", True)

        assert FlagStore(path).get_bool("migratedLegacyCheckInsToNotes_v1") is True
        assert os.listdir(tmp) == ["migration_state.yml"]
