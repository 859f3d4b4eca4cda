"""
Adapter helper: locate the local model script and its dataset.

The service may be started from the repository root or from inside the
module directory, so configured relative paths are tried against two
candidate roots. Script and dataset always move together: a pair is never
assembled from two different roots.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MODULE_ROOT_NAME = "FinancialForecastingSystem"
OUTPUT_DIR_NAME = "out"
FALLBACK_OUTPUT_DIR = Path("models") / "out"


@dataclass(frozen=True)
class ResolvedPaths:
    """Absolute locations handed to the local model process."""

    script: Path
    data: Path
    out_dir: Path

    @property
    def script_exists(self) -> bool:
        return self.script.is_file()


def _join(root: Path, relative: str) -> Path:
    return Path(os.path.normpath(root / relative))


class PathResolver:
    """Resolves configured script/dataset paths against the working directory."""

    def __init__(
        self,
        script_path: str,
        data_path: str,
        cwd: Optional[Path] = None,
    ) -> None:
        self._script_path = script_path
        self._data_path = data_path
        self._cwd = cwd

    def resolve(self) -> ResolvedPaths:
        """Resolve script, dataset and output directory.

        The output directory is created if missing. A script that exists
        under neither root is still returned (under the module root) so the
        caller can report it.

        Returns:
            The resolved paths.
        """
        run_root = Path(os.path.normpath(self._cwd or Path.cwd()))
        module_root = run_root / MODULE_ROOT_NAME

        script = _join(module_root, self._script_path)
        data = _join(module_root, self._data_path)

        if not script.is_file():
            alt_script = _join(run_root, self._script_path)
            if alt_script.is_file():
                logger.debug(
                    "Model script not under %s, using run root %s",
                    module_root,
                    run_root,
                )
                script = alt_script
                data = _join(run_root, self._data_path)

        if script.parent != script:
            out_dir = script.parent / OUTPUT_DIR_NAME
        else:
            out_dir = run_root / FALLBACK_OUTPUT_DIR
        out_dir.mkdir(parents=True, exist_ok=True)

        return ResolvedPaths(script=script, data=data, out_dir=out_dir)
