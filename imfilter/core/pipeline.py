"""
Repetition driver for the bilateral filter.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Union

import numpy as np

from imfilter.core.config import Backend, FilterConfig, FilterParameters
from imfilter.core.errors import ConfigurationError
from imfilter.filters.bilateral import bilateral_filter_vectorized, check_image, filter_rows
from imfilter.io.image_io import save_image

logger = logging.getLogger(__name__)

IntermediateSink = Callable[[np.ndarray, int], None]


class BilateralImageFilter:
    """
    Apply a bilateral filter to a whole image, ``reps`` times.

    Two buffers are used per run: the frozen input of the current pass and
    the hot output being written. They swap roles between passes, so a pass
    always reads the complete output of the previous one.
    """

    def __init__(
        self,
        params: Optional[FilterParameters] = None,
        config: Optional[FilterConfig] = None,
        intermediate_sink: Optional[IntermediateSink] = None,
    ) -> None:
        self.params = params or FilterParameters()
        self.params.validate()
        self.config = config or FilterConfig()
        self.config.validate()

        logger.info("Initializing bilateral filter")
        logger.info("  s=%g b=%g reps=%d", self.params.spatial_sigma, self.params.brightness_sigma, self.params.reps)
        logger.info("  Backend: %s (nthreads=%d)", self.config.backend.value, self.config.nthreads)

        self._init_backend()

        if intermediate_sink is None and self.config.write_intermediate:
            intermediate_sink = self._write_intermediate
        self.intermediate_sink = intermediate_sink

    def _init_backend(self) -> None:
        self.torch_filter = None

        if self.config.backend == Backend.TORCH:
            try:
                from imfilter.torch import TorchBilateralFilter
            except ImportError as exc:
                raise ConfigurationError("The torch backend requires PyTorch to be installed") from exc

            self.torch_filter = TorchBilateralFilter(
                spatial_sigma=self.params.spatial_sigma,
                brightness_sigma=self.params.brightness_sigma,
            )

        if self.config.backend != Backend.REFERENCE and self.config.nthreads > 1:
            logger.warning(
                "nthreads=%d ignored: the %s backend is not threaded.",
                self.config.nthreads,
                self.config.backend.value,
            )

    def process(
        self,
        image: np.ndarray,
        return_intermediate: bool = False,
    ) -> Union[np.ndarray, Dict[str, Union[np.ndarray, List[np.ndarray]]]]:
        """
        Filter ``image`` and return the result of the final repetition.

        The caller's array is never modified. With ``return_intermediate``
        a dict with ``input``, ``repetitions`` (output of every pass) and
        ``output`` is returned instead.
        """

        image = check_image(image)
        height, width = image.shape[:2]
        reps = self.params.reps

        logger.info("Filtering image: %dx%d", width, height)

        results: Optional[Dict[str, Union[np.ndarray, List[np.ndarray]]]] = (
            {"input": image, "repetitions": []} if return_intermediate else None
        )

        frozen = image.copy()
        hot = np.empty_like(frozen)

        for rep in range(reps):
            logger.info("Repetition %d/%d", rep + 1, reps)
            self._run_pass(frozen, hot)

            if results is not None:
                results["repetitions"].append(hot.copy())

            if rep < reps - 1:
                if self.intermediate_sink is not None:
                    self.intermediate_sink(hot, rep)
                frozen, hot = hot, frozen

        if results is not None:
            results["output"] = hot
            return results
        return hot

    def _run_pass(self, frozen: np.ndarray, hot: np.ndarray) -> None:
        s = self.params.spatial_sigma
        b = self.params.brightness_sigma

        if self.config.backend == Backend.VECTORIZED:
            hot[...] = bilateral_filter_vectorized(frozen, s, b)
        elif self.config.backend == Backend.TORCH:
            hot[...] = self.torch_filter.filter_image(frozen)
        else:
            self._run_reference(frozen, hot, s, b)

    def _run_reference(self, frozen: np.ndarray, hot: np.ndarray, s: float, b: float) -> None:
        height = frozen.shape[0]
        nthreads = min(self.config.nthreads, height)

        if nthreads == 1:
            filter_rows(frozen, hot, 0, height, s, b)
            return

        # Each worker owns a band of rows; result() re-raises worker errors
        bounds = np.linspace(0, height, nthreads + 1).astype(int)
        with ThreadPoolExecutor(max_workers=nthreads) as pool:
            futures = [
                pool.submit(filter_rows, frozen, hot, int(start), int(stop), s, b)
                for start, stop in zip(bounds[:-1], bounds[1:])
            ]
            for future in futures:
                future.result()

    def _write_intermediate(self, image: np.ndarray, rep: int) -> None:
        path = self.config.intermediate_path(rep)
        save_image(image, path)
        logger.debug("Intermediate result of repetition %d written to %s", rep, path)


def bilateral_filter(
    image: np.ndarray,
    spatial_sigma: float = 0.0,
    brightness_sigma: float = 0.0,
    reps: int = 1,
    backend: Backend = Backend.REFERENCE,
    nthreads: int = 1,
) -> np.ndarray:
    """
    Convenience wrapper for quick filtering without intermediate files.
    """

    params = FilterParameters(
        spatial_sigma=spatial_sigma,
        brightness_sigma=brightness_sigma,
        reps=reps,
    )
    config = FilterConfig(backend=backend, nthreads=nthreads, write_intermediate=False)

    return BilateralImageFilter(params, config).process(image)
