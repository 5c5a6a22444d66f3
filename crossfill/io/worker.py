"""Background generation worker with id-tagged progress and result messages.

Requests run one at a time on a single worker thread, in submission order.
Each request produces zero or more ``progress`` messages followed by exactly
one ``result`` or ``error`` message, all carrying the request id so callers
can ignore answers to requests they no longer care about.
"""

from __future__ import annotations

import itertools
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from ..core.constants import Algorithm
from ..core.exceptions import GenerationError
from ..core.models import CrosswordData, WordEntry
from ..data.dictionary import DictionaryIndex
from ..engine.generator import GeneratorConfig, generate_crossword
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

PROGRESS = "progress"
RESULT = "result"
ERROR = "error"

GenerateFn = Callable[..., CrosswordData]
Listener = Callable[["WorkerMessage"], None]


@dataclass
class WorkerMessage:
    type: str
    id: int
    message: str = ""
    percent: float = 0.0
    data: Optional[CrosswordData] = None


class GenerationWorker:
    """Serializes generation requests onto one background thread.

    Every message is put on :attr:`messages` and handed to registered
    listeners. Listeners run on the worker thread.
    """

    def __init__(
        self,
        dictionary: Optional[DictionaryIndex] = None,
        config: Optional[GeneratorConfig] = None,
        generate: GenerateFn = generate_crossword,
    ) -> None:
        self.dictionary = dictionary
        self.config = config or GeneratorConfig()
        self.messages: "queue.Queue[WorkerMessage]" = queue.Queue()
        self._generate = generate
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="crossfill-worker")
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def submit(self, words: Sequence[WordEntry], algorithm: Union[Algorithm, str] = Algorithm.SMART) -> int:
        """Queue a request and return its id."""

        request_id = self._allocate_id()
        self._enqueue(request_id, list(words), algorithm)
        return request_id

    def generate_async(
        self,
        words: Sequence[WordEntry],
        algorithm: Union[Algorithm, str] = Algorithm.SMART,
        on_progress: Optional[Callable[[str, float], None]] = None,
    ) -> "Future[CrosswordData]":
        """Queue a request and return a future for its result.

        ``on_progress`` receives only this request's progress messages. An
        ``error`` message fails the future with :class:`GenerationError`.
        """

        future: "Future[CrosswordData]" = Future()
        request_id = self._allocate_id()

        def listener(message: WorkerMessage) -> None:
            if message.id != request_id:
                return
            if message.type == PROGRESS:
                if on_progress:
                    on_progress(message.message, message.percent)
                return
            self.remove_listener(listener)
            if message.type == RESULT:
                future.set_result(message.data)
            else:
                future.set_exception(GenerationError(message.message))

        self.add_listener(listener)
        self._enqueue(request_id, list(words), algorithm)
        return future

    def next_message(self, timeout: Optional[float] = None) -> WorkerMessage:
        """Block until the next message arrives; raises ``queue.Empty`` on timeout."""

        return self.messages.get(timeout=timeout)

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "GenerationWorker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _allocate_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def _enqueue(self, request_id: int, words: List[WordEntry], algorithm: Union[Algorithm, str]) -> None:
        LOGGER.debug("Queued request %d (%s, %d words)", request_id, algorithm, len(words))
        self._executor.submit(self._run, request_id, words, algorithm)

    def _run(self, request_id: int, words: List[WordEntry], algorithm: Union[Algorithm, str]) -> None:
        def progress(message: str, percent: float) -> None:
            self._post(WorkerMessage(type=PROGRESS, id=request_id, message=message, percent=percent))

        try:
            result = self._generate(
                words,
                algorithm,
                dictionary=self.dictionary,
                on_progress=progress,
                config=self.config,
            )
        except Exception as exc:  # reported to the caller by id
            LOGGER.exception("Request %d failed", request_id)
            self._post(WorkerMessage(type=ERROR, id=request_id, message=str(exc) or type(exc).__name__))
            return
        self._post(WorkerMessage(type=RESULT, id=request_id, data=result))

    def _post(self, message: WorkerMessage) -> None:
        self.messages.put(message)
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(message)
