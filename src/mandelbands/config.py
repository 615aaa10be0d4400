"""Configuration objects, argument parsing and YAML loading for band renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

import yaml

T = TypeVar("T")

DEFAULT_WORKERS = 8
DEFAULT_EXPERIMENT_NAME = "mandelbands"


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single Mandelbrot render."""

    output: str
    width: int
    height: int
    upper_left: complex
    lower_right: complex
    workers: int = DEFAULT_WORKERS

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Pixel bounds must be positive, got {self.width}x{self.height}")
        if self.workers <= 0:
            raise ValueError(f"Worker count must be positive, got {self.workers}")

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        return (
            f"{Path(self.output).stem}_{self.image_size}_w{self.workers}_"
            f"{format_complex(self.upper_left)}_{format_complex(self.lower_right)}"
        )

    def to_dict(self) -> dict:
        """Convert to flat dictionary for MLflow logging."""
        data = asdict(self)
        for key in ("upper_left", "lower_right"):
            point = data.pop(key)
            data[f"{key}_re"] = point.real
            data[f"{key}_im"] = point.imag
        return data

    def to_cli_args(self) -> List[str]:
        """Convert config to CLI arguments."""
        return [
            self.output,
            self.image_size,
            format_complex(self.upper_left),
            format_complex(self.lower_right),
            f"--workers={self.workers}",
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(
    output="mandelbrot.png",
    width=1920,
    height=1080,
    upper_left=complex(-1.0, 1.0),
    lower_right=complex(1.0, -1.0),
)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def parse_pair(s: str, separator: str, cast: Callable[[str], T]) -> Optional[Tuple[T, T]]:
    """Split ``s`` at the first ``separator`` and cast both halves.

    Returns ``None`` when the separator is missing or either half does not
    parse, e.g. ``parse_pair("800,600f", ",", int)``.
    """
    index = s.find(separator)
    if index == -1:
        return None
    try:
        return cast(s[:index]), cast(s[index + 1:])
    except ValueError:
        return None


def _strict_number(cast: Callable[[str], T]) -> Callable[[str], T]:
    """Wrap a numeric cast so digit separators and padding are rejected."""

    def parse(token: str) -> T:
        if "_" in token or token != token.strip():
            raise ValueError(f"invalid number {token!r}")
        return cast(token)

    return parse


def parse_complex(s: str) -> Optional[complex]:
    """Parse ``"RE,IM"`` into a complex number."""
    pair = parse_pair(s, ",", _strict_number(float))
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)


def parse_bounds(s: str) -> Optional[Tuple[int, int]]:
    """Parse ``"WIDTHxHEIGHT"`` into positive pixel bounds."""
    pair = parse_pair(s, "x", _strict_number(int))
    if pair is None or pair[0] <= 0 or pair[1] <= 0:
        return None
    return pair


def format_complex(point: complex) -> str:
    return f"{point.real:g},{point.imag:g}"


def load_render_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load a YAML batch file and build every render it lists.

    Supports a flat ``renders`` list as well as the grouped format that nests
    several render lists under ``suites``.
    """
    return [config for _, configs in load_named_render_configs(yaml_path) for config in configs]


def load_named_render_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    suites = cfg.get("suites")
    results: List[tuple[str, List[RenderConfig]]] = []

    if suites:
        for entry in suites:
            name = entry.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            suite_defaults = {**defaults, **(entry.get("defaults", {}) or {})}
            results.append((name, _expand_renders(suite_defaults, entry.get("renders") or [])))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    if suite:
        raise ValueError(f"{yaml_path} defines no suites")
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_renders(defaults, cfg.get("renders") or []))]


def _expand_renders(defaults: Dict[str, object], renders: List[Dict[str, object]]) -> List[RenderConfig]:
    """Merge each render entry over the defaults into RenderConfig instances."""
    if not renders:
        return [_build_render_config(defaults)]
    return [_build_render_config({**defaults, **(entry or {})}) for entry in renders]


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(raw_data)
    missing = [key for key in ("output", "width", "height", "upper_left", "lower_right") if key not in data]
    if missing:
        raise ValueError(f"Render entry is missing {', '.join(missing)}: {raw_data!r}")
    return RenderConfig(**data)  # type: ignore[arg-type]


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    image = result.pop("image_size", None)
    if image is not None:
        width, height = _normalize_bounds_entry(image)
        result.setdefault("width", width)
        result.setdefault("height", height)
    if "width" in result:
        result["width"] = int(result["width"])
    if "height" in result:
        result["height"] = int(result["height"])
    if "workers" in result:
        result["workers"] = int(result["workers"])
    if "output" in result:
        result["output"] = str(result["output"])
    for key in ("upper_left", "lower_right"):
        if key in result:
            result[key] = _normalize_point_entry(result[key])
    return result


def _normalize_bounds_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_size dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        bounds = parse_bounds(entry)
        if bounds is not None:
            return bounds
    raise ValueError(f"Unsupported image size specification: {entry!r}")


def _normalize_point_entry(entry: object) -> complex:
    if isinstance(entry, complex):
        return entry
    if isinstance(entry, (int, float)):
        return complex(entry, 0.0)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return complex(float(entry[0]), float(entry[1]))
    if isinstance(entry, str):
        point = parse_complex(entry)
        if point is not None:
            return point
    raise ValueError(f"Unsupported complex point specification: {entry!r}")
