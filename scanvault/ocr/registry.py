"""Process-wide OCR model registry with single-flight loading.

The first caller of :meth:`ModelRegistry.get_model` runs the loader; callers
arriving while the load is in flight wait on the same future and receive the
same model or the same :class:`ModelLoadError`. A failed load leaves the
registry uninitialized so a later call can retry.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future
from enum import StrEnum

from scanvault.errors import ModelLoadError
from scanvault.utils.logger import get_logger

from .models import OCRModel

logger = get_logger(__name__)


class ModelState(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class ModelRegistry:
    """Lazily loads and caches the OCR model.

    Args:
        loader: Zero-argument callable returning a ready model. Called at
            most once per successful load.
    """

    def __init__(self, loader: Callable[[], OCRModel]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._model: OCRModel | None = None
        self._inflight: Future[OCRModel] | None = None
        self.load_count = 0

    @property
    def state(self) -> ModelState:
        if self._model is not None:
            return ModelState.READY
        if self._inflight is not None:
            return ModelState.LOADING
        return ModelState.UNINITIALIZED

    def get_model(self) -> OCRModel:
        """Return the ready model, loading it on first use.

        Raises:
            ModelLoadError: If the load this call waited on failed.
        """
        model = self._model
        if model is not None:
            return model

        with self._lock:
            if self._model is not None:
                return self._model
            leader = self._inflight is None
            if leader:
                self._inflight = Future()
                self.load_count += 1
            future = self._inflight

        if leader:
            self._load(future)
        return future.result()

    def _load(self, future: "Future[OCRModel]") -> None:
        logger.info("Loading OCR model (attempt %d)", self.load_count)
        try:
            model = self._invoke_loader()
        except BaseException as exc:
            with self._lock:
                self._inflight = None
            future.set_exception(exc)
            logger.error("OCR model load failed: %s", exc)
            return

        with self._lock:
            self._model = model
            self._inflight = None
        future.set_result(model)
        logger.info("OCR model %s ready", getattr(model, "name", type(model).__name__))

    def _invoke_loader(self) -> OCRModel:
        try:
            model = self._loader()
        except ModelLoadError:
            raise
        except Exception as exc:
            raise ModelLoadError() from exc
        if model is None:
            raise ModelLoadError("Model loader returned no model")
        return model
