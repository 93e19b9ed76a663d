"""Configuration objects and YAML loading for Mandelbrot renders."""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import product
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

import yaml

from .geometry import Bounds, Window
from .scheduling import DEFAULT_WORKERS

T = TypeVar("T")


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single render."""

    output: str
    width: int
    height: int
    upper_left: complex = complex(-1.20, 0.35)
    lower_right: complex = complex(-1.0, 0.20)
    workers: int = DEFAULT_WORKERS

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.width, self.height)

    @property
    def window(self) -> Window:
        return Window(self.upper_left, self.lower_right)

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        return (
            f"bands_w{self.workers}_{self.image_size}_"
            f"{format_complex(self.upper_left)}_{format_complex(self.lower_right)}"
        )

    def to_dict(self) -> dict:
        """Convert to a flat dictionary for MLflow logging."""
        return {
            "output": self.output,
            "width": self.width,
            "height": self.height,
            "upper_left": format_complex(self.upper_left),
            "lower_right": format_complex(self.lower_right),
            "workers": self.workers,
        }

    def to_cli_args(self) -> List[str]:
        """Convert config to ``main.py`` arguments."""
        return [
            f"--workers={self.workers}",
            "--",
            self.output,
            self.image_size,
            format_complex(self.upper_left),
            format_complex(self.lower_right),
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(
    output="mandel.png",
    width=1000,
    height=750,
    upper_left=complex(-1.20, 0.35),
    lower_right=complex(-1.0, 0.20),
    workers=DEFAULT_WORKERS,
)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def parse_pair(text: str, separator: str, convert: Callable[[str], T]) -> Optional[Tuple[T, T]]:
    """Parse ``"<left><separator><right>"`` such as ``"400x600"`` or ``"1.0,0.5"``.

    Returns ``None`` when the separator is missing or either side does not
    convert.
    """
    index = text.find(separator)
    if index < 0:
        return None
    try:
        return convert(text[:index]), convert(text[index + 1 :])
    except ValueError:
        return None


def parse_complex(text: str) -> Optional[complex]:
    """Parse a comma separated pair of floats such as ``"1.25,-0.0625"``."""
    pair = parse_pair(text, ",", float)
    if pair is None:
        return None
    return complex(*pair)


def parse_image_size(value: str) -> Tuple[int, int]:
    pair = parse_pair(value.lower(), "x", int)
    if pair is None:
        raise ValueError(f"Invalid image size {value!r}, expected WIDTHxHEIGHT")
    return pair


def format_complex(value: complex) -> str:
    return f"{value.real!r},{value.imag!r}"


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Supports a top-level ``sweep`` as well as a list of named ``experiments``
    each carrying its own ``defaults`` and ``sweep``.
    """
    return [config for _, configs in load_named_sweep_configs(yaml_path) for config in configs]


def get_config_by_index(yaml_path: str | Path, index: int) -> RenderConfig:
    """Get a specific config by index from sweep."""
    configs = load_sweep_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    keys = list(sweep.keys())
    if not keys:
        return [_build_render_config(defaults)]

    values = [sweep[k] if isinstance(sweep[k], list) else [sweep[k]] for k in keys]
    return [_build_render_config({**defaults, **dict(zip(keys, combo))}) for combo in product(*values)]


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(raw_data)
    merged = {**DEFAULT_RENDER_CONFIG.to_dict(), **data}
    merged["upper_left"] = _coerce_point(merged["upper_left"])
    merged["lower_right"] = _coerce_point(merged["lower_right"])
    merged["output"] = str(merged["output"]).format(**{k: merged[k] for k in ("width", "height", "workers")})
    return RenderConfig(**merged)  # type: ignore[arg-type]


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    image = result.pop("image_size", None)
    if image is not None:
        width, height = _normalize_shape_entry(image)
        result["width"], result["height"] = width, height
    for key in ("width", "height", "workers"):
        if key in result:
            result[key] = int(result[key])  # type: ignore[arg-type]
    for key in ("upper_left", "lower_right"):
        if key in result:
            result[key] = _coerce_point(result[key])
    if "output" in result:
        result["output"] = str(result["output"])
    return result


def _coerce_point(entry: object) -> complex:
    if isinstance(entry, complex):
        return entry
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return complex(float(entry[0]), float(entry[1]))
    if isinstance(entry, str):
        point = parse_complex(entry)
        if point is not None:
            return point
    raise ValueError(f"Unsupported complex point specification: {entry!r}")


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_size dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        return parse_image_size(entry)
    raise ValueError(f"Unsupported image size specification: {entry!r}")
