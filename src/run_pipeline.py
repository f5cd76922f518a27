"""Pipeline runner for retail sales analytics."""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List

import yaml

from pipeline.task import Task
from utils.io import get_paths, logger

PATHS = get_paths()
SRC_DIR = PATHS.base / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

CONFIG_PATH = PATHS.configs / "artifacts.yml"


def _resolve_entrypoint(entrypoint: str) -> Callable[[], object]:
    if ":" not in entrypoint:
        raise ValueError(f"Entrypoint '{entrypoint}' must be 'module:function'")
    module_name, func_name = entrypoint.split(":", maxsplit=1)
    module = importlib.import_module(module_name)
    func = getattr(module, func_name)
    return func


def load_artifacts(path: Path = CONFIG_PATH) -> Dict[str, dict]:
    if not path.exists():
        raise FileNotFoundError(f"No encuentro {path}")
    with path.open("r", encoding="utf-8") as fh:
        config = yaml.safe_load(fh) or {}
    return config.get("artifacts", {}) or {}


def build_tasks(artifact_specs: Dict[str, dict]) -> Dict[str, Task]:
    # Map outputs to artifact name for dependency resolution
    output_map: Dict[str, str] = {}
    for name, spec in artifact_specs.items():
        for output in spec.get("outputs", []) or []:
            if output in output_map:
                raise ValueError(
                    f"Output '{output}' produced by both '{output_map[output]}' and '{name}'"
                )
            output_map[output] = name

    tasks: Dict[str, Task] = {}
    for name, spec in artifact_specs.items():
        entrypoint = spec.get("entrypoint")
        if not entrypoint:
            raise ValueError(f"Artifact '{name}' missing 'entrypoint'")
        tasks[name] = Task(
            name=name,
            run=_resolve_entrypoint(entrypoint),
            layer=spec.get("layer", "gold"),
            inputs=spec.get("inputs", []) or [],
            outputs=spec.get("outputs", []) or [],
        )

    # Attach dependencies
    for name, task in tasks.items():
        deps: List[Task] = []
        for input_path in task.inputs:
            dependency_name = output_map.get(input_path)
            if dependency_name and dependency_name != name and tasks[dependency_name] not in deps:
                deps.append(tasks[dependency_name])
        task.requires = deps
    return tasks


def run_pipeline(targets: Iterable[str] | None = None, *, force: bool = False) -> None:
    artifact_specs = load_artifacts(CONFIG_PATH)
    if not artifact_specs:
        raise FileNotFoundError(f"No artifacts defined in {CONFIG_PATH}")

    tasks = build_tasks(artifact_specs)
    selected = list(targets) if targets else list(artifact_specs.keys())
    for target in selected:
        if target not in tasks:
            raise KeyError(f"Unknown artifact '{target}'")
    for target in selected:
        tasks[target].execute(force=force)


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run retail sales analytics pipeline")
    parser.add_argument(
        "artifacts",
        nargs="*",
        help="Specific artifacts to build (default: all).",
    )
    parser.add_argument("--force", action="store_true", help="Rebuild tasks already run in this process.")
    args = parser.parse_args(argv)

    logger.info("Starting pipeline (targets=%s)", args.artifacts or "ALL")
    run_pipeline(args.artifacts or None, force=args.force)
    logger.info("Pipeline finished")


if __name__ == "__main__":
    main()
