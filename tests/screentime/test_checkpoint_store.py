import unittest

from screentime import CheckpointStore
from storage import InMemoryKeyValueStore, StorageError


class _RaisingStore(InMemoryKeyValueStore):
    def save(self, key: str, value: str) -> bool:
        raise StorageError("read-only")

    def remove_all(self, keys) -> None:
        raise StorageError("read-only")


class CheckpointStoreTests(unittest.TestCase):
    def test_empty_store_loads_zero_without_checkpoint(self) -> None:
        stored = CheckpointStore(InMemoryKeyValueStore()).load()

        self.assertEqual(0, stored.remaining_seconds)
        self.assertFalse(stored.was_running)

    def test_save_writes_epoch_milliseconds(self) -> None:
        kv = InMemoryKeyValueStore()
        store = CheckpointStore(kv)

        self.assertTrue(store.save(90, 1_700_000_000.25))

        self.assertEqual(
            {"@timer_remaining": "90", "@timer_start_time": "1700000000250"},
            kv.snapshot(),
        )
        loaded = store.load()
        self.assertEqual(90, loaded.remaining_seconds)
        self.assertAlmostEqual(1_700_000_000.25, loaded.checkpoint)

    def test_save_without_checkpoint_removes_stale_key(self) -> None:
        kv = InMemoryKeyValueStore({"@timer_start_time": "123"})

        CheckpointStore(kv).save(5, None)

        self.assertEqual({"@timer_remaining": "5"}, kv.snapshot())

    def test_iso_checkpoint_is_accepted(self) -> None:
        kv = InMemoryKeyValueStore(
            {
                "@timer_remaining": "30",
                "@timer_start_time": "2023-11-14T22:13:20Z",
            }
        )

        loaded = CheckpointStore(kv).load()

        self.assertEqual(1_700_000_000.0, loaded.checkpoint)

    def test_checkpoint_is_ignored_when_budget_is_empty(self) -> None:
        kv = InMemoryKeyValueStore({"@timer_remaining": "0", "@timer_start_time": "1000"})

        self.assertIsNone(CheckpointStore(kv).load().checkpoint)

    def test_malformed_values_are_treated_as_absent(self) -> None:
        kv = InMemoryKeyValueStore({"@timer_remaining": "-4", "@timer_start_time": "soon"})

        with self.assertLogs("checkpoint_store", level="WARNING") as logs:
            loaded = CheckpointStore(kv).load()

        self.assertEqual(0, loaded.remaining_seconds)
        self.assertIsNone(loaded.checkpoint)
        self.assertEqual(2, len(logs.output))

    def test_storage_errors_are_logged_not_raised(self) -> None:
        store = CheckpointStore(_RaisingStore())

        with self.assertLogs("checkpoint_store", level="ERROR"):
            self.assertFalse(store.save(10, None))
            self.assertFalse(store.clear())


if __name__ == "__main__":
    unittest.main()
