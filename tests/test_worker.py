import unittest
from unittest.mock import MagicMock

from crossfill.core.exceptions import GenerationError
from crossfill.core.models import CrosswordData, WordEntry
from crossfill.data.dictionary import DictionaryIndex
from crossfill.io.worker import ERROR, PROGRESS, RESULT, GenerationWorker

TIMEOUT = 30


def fake_generate(words, algorithm, dictionary=None, on_progress=None, config=None):
    on_progress(f"working on {algorithm}", 50)
    if algorithm == "boom":
        raise ValueError("boom")
    return CrosswordData.empty()


class GenerationWorkerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.worker = GenerationWorker(generate=fake_generate)

    def tearDown(self) -> None:
        self.worker.close()

    def drain(self, count):
        return [self.worker.next_message(timeout=TIMEOUT) for _ in range(count)]

    def test_ids_increase_and_messages_follow_submission_order(self) -> None:
        first = self.worker.submit([], "smart")
        second = self.worker.submit([], "dense")
        self.assertLess(first, second)

        messages = self.drain(4)
        self.assertEqual(
            [(m.type, m.id) for m in messages],
            [(PROGRESS, first), (RESULT, first), (PROGRESS, second), (RESULT, second)],
        )
        self.assertEqual((messages[0].message, messages[0].percent), ("working on smart", 50))
        self.assertEqual(messages[1].data.words, [])

    def test_failure_becomes_error_message_and_worker_keeps_serving(self) -> None:
        with self.assertLogs("crossfill.io.worker", level="ERROR"):
            failing = self.worker.submit([], "boom")
            later = self.worker.submit([], "smart")
            messages = self.drain(4)

        terminal = [m for m in messages if m.type != PROGRESS]
        self.assertEqual([(m.type, m.id) for m in terminal], [(ERROR, failing), (RESULT, later)])
        self.assertEqual(terminal[0].message, "boom")

    def test_generate_async_resolves_only_its_own_request(self) -> None:
        progress = MagicMock()
        self.worker.submit([], "dense")
        future = self.worker.generate_async([], "smart", on_progress=progress)

        result = future.result(timeout=TIMEOUT)
        self.assertIsInstance(result, CrosswordData)
        progress.assert_called_once_with("working on smart", 50)

    def test_generate_async_error_fails_the_future(self) -> None:
        with self.assertLogs("crossfill.io.worker", level="ERROR"):
            future = self.worker.generate_async([], "boom")
            with self.assertRaises(GenerationError):
                future.result(timeout=TIMEOUT)


class WorkerIntegrationTests(unittest.TestCase):
    def test_real_generation_off_thread(self) -> None:
        dictionary = DictionaryIndex([WordEntry(w) for w in ("CAT", "CAR", "ART", "TAR")])
        with GenerationWorker(dictionary=dictionary) as worker:
            future = worker.generate_async([WordEntry("cat"), WordEntry("car")], "original")
            result = future.result(timeout=TIMEOUT)
        self.assertEqual(sorted(w.word for w in result.words), ["CAR", "CAT"])


if __name__ == "__main__":
    unittest.main()
