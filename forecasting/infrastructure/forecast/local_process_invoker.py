"""
Adapter: Local model process.

Implements LocalModelPort.
Launches the model script as a subprocess with a fixed argument contract,
captures its merged stdout/stderr and parses the JSON object it prints.

Backend contract:
    <python> <script> --data <path> --window <int> --epochs 50
        --out_dir <path> --algorithm <id> --feature <name>

The process must print a single JSON object and exit with status 0.
An ``error`` key in that object is a failure even on a zero exit code.
"""

import json
import logging
import subprocess
from typing import Optional

from forecasting.core.config import Settings
from forecasting.domain.forecast.entities import (
    BackendPayload,
    DataSource,
    PredictionRequest,
)
from forecasting.domain.forecast.errors import BackendExecutionError
from forecasting.domain.forecast.ports import LocalModelPort
from forecasting.infrastructure.forecast.path_resolver import (
    PathResolver,
    ResolvedPaths,
)

logger = logging.getLogger(__name__)

EPOCHS = 50
ERROR_KEY = "error"


class LocalProcessInvoker(LocalModelPort):
    """Runs one prediction through the local model script.

    The wait on the process is bounded by ``local_timeout_seconds``;
    a process still running at the deadline is killed and reaped.
    """

    def __init__(
        self, settings: Settings, resolver: Optional[PathResolver] = None
    ) -> None:
        self._settings = settings
        self._resolver = resolver or PathResolver(
            settings.local_model_path, settings.local_data_file
        )

    def resolve_feature(self, feature_name: Optional[str]) -> str:
        """Return the requested feature, or the configured default."""
        if feature_name is None or not feature_name.strip():
            return self._settings.default_feature
        return feature_name.strip()

    def build_command(
        self, paths: ResolvedPaths, algorithm_name: str, feature: str
    ) -> list[str]:
        """Build the argv for the model process."""
        return [
            self._settings.python_exec,
            str(paths.script),
            "--data", str(paths.data),
            "--window", str(self._settings.prediction_window),
            "--epochs", str(EPOCHS),
            "--out_dir", str(paths.out_dir),
            "--algorithm", algorithm_name,
            "--feature", feature,
        ]

    def invoke(self, request: PredictionRequest) -> BackendPayload:
        """Run the local model for a request.

        Args:
            request: Symbol, algorithm and optional feature to predict.

        Returns:
            The parsed payload, back-filled with algorithm, symbol and
            feature where the model did not report them.

        Raises:
            BackendExecutionError: If the script is missing, the process
                cannot start, times out, exits non-zero, prints something
                other than a JSON object, or reports an error.
        """
        feature = self.resolve_feature(request.feature_name)
        paths = self._resolver.resolve()
        if not paths.script_exists:
            raise BackendExecutionError(
                f"local model script not found: {paths.script}"
            )

        command = self.build_command(paths, request.algorithm_name, feature)
        logger.info(
            "Launching local model: symbol=%s algorithm=%s feature=%s",
            request.symbol,
            request.algorithm_name,
            feature,
        )
        output, exit_code = self._run(command)

        if exit_code != 0:
            raise BackendExecutionError(
                f"local model exit code: {exit_code}, output: {output}",
                exit_code=exit_code,
                output=output,
            )

        fields = self._parse(output)
        fields.setdefault("algorithm", request.algorithm_name)
        fields.setdefault("symbol", request.symbol)
        fields.setdefault("feature", feature)
        return BackendPayload(source=DataSource.LOCAL, fields=fields)

    def _run(self, command: list[str]) -> tuple[str, int]:
        """Run the process to completion, returning merged output and exit code."""
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise BackendExecutionError(
                f"local model could not be started: {exc}"
            ) from exc

        timeout = self._settings.local_timeout_seconds
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            output, _ = process.communicate()
            raise BackendExecutionError(
                f"local model timed out after {timeout}s, output: {output}",
                output=output,
            ) from exc
        return output, process.returncode

    @staticmethod
    def _parse(output: str) -> dict:
        """Parse the process output as a JSON object."""
        try:
            parsed = json.loads(output)
        except ValueError as exc:
            raise BackendExecutionError(
                f"local model returned error: {output}", exit_code=0, output=output
            ) from exc
        if not isinstance(parsed, dict) or ERROR_KEY in parsed:
            raise BackendExecutionError(
                f"local model returned error: {output}", exit_code=0, output=output
            )
        return parsed
