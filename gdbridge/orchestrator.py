"""Pipeline orchestration: parse, catalog, resolve, apply policy, emit."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar

from .catalog import TypeCatalog, load_default_native_api, load_native_api, scan_project_types
from .config import BridgeConfig, load_config
from .diagnostics import parse_skipped
from .emit import UnitRenderer, render_bridge, render_proxy
from .errors import ScriptParseError
from .logging import get_logger, log_diagnostic
from .models import (
    Diagnostic,
    GeneratedUnit,
    GenerationResult,
    ResolvedClass,
    ScriptClass,
    ScriptSource,
    UnitKind,
)
from .native import proxy_name_for
from .parsing import parse_script
from .project_scanner import ProjectScanner
from .resolution import InheritanceResolver
from .stores import OutputCache

DEFAULT_OUTPUT_DIR = "Generated"

_T = TypeVar("_T")
_R = TypeVar("_R")


@dataclass
class RunOutcome:
    """Result of a disk-facing generation run."""

    result: GenerationResult
    output_dir: Path
    written: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    dry_run: bool = False


class BridgeGenerator:
    """Coordinates one generation run over an immutable input snapshot."""

    def __init__(
        self,
        scanner: ProjectScanner | None = None,
        renderer: UnitRenderer | None = None,
        *,
        max_workers: int = 1,
    ) -> None:
        self.scanner = scanner or ProjectScanner()
        self.renderer = renderer or UnitRenderer()
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("orchestrator")

    def parse(self, sources: Iterable[ScriptSource]) -> Tuple[List[ScriptClass], List[Diagnostic]]:
        """Parse every source in isolation; failures only drop the offending file."""
        classes: List[ScriptClass] = []
        diagnostics: List[Diagnostic] = []
        for source in sources:
            try:
                script_class = parse_script(source.text, source.path)
            except ScriptParseError as exc:
                diagnostics.append(parse_skipped(source.path, str(exc)))
                continue
            if script_class is None:
                self.logger.debug("Skipping %s: no class_name declaration", source.path or "<inline>")
                continue
            classes.append(script_class)
        return classes, diagnostics

    def generate(
        self,
        sources: Iterable[ScriptSource],
        catalog: TypeCatalog,
        config: BridgeConfig | None = None,
    ) -> GenerationResult:
        """Return one bridge per eligible class and one proxy per used native type."""
        config = config or BridgeConfig()
        classes, diagnostics = self.parse(sources)
        self.logger.debug("Parsed %d script classes", len(classes))

        resolution = InheritanceResolver(classes, catalog, config).resolve()
        diagnostics.extend(resolution.diagnostics)

        emittable = sorted(resolution.emittable, key=lambda resolved: resolved.bridge_type_name)

        def emit_bridge(resolved: ResolvedClass) -> GeneratedUnit:
            text = render_bridge(resolved, catalog, self.renderer)
            return GeneratedUnit(name=resolved.bridge_type_name, text=text, kind=UnitKind.BRIDGE)

        def emit_proxy(native_name: str) -> GeneratedUnit:
            text = render_proxy(native_name, catalog, self.renderer)
            return GeneratedUnit(name=proxy_name_for(native_name), text=text, kind=UnitKind.PROXY)

        if resolution.used_native_types and not catalog.describes_members:
            self.logger.warning(
                "Native API description lists no members; proxies for %s forward nothing. "
                "Pass --native-api to describe the engine surface.",
                ", ".join(resolution.used_native_types),
            )

        units = self._map(emit_bridge, emittable)
        units.extend(self._map(emit_proxy, resolution.used_native_types))

        for diagnostic in diagnostics:
            log_diagnostic(self.logger, diagnostic)
        self.logger.info(
            "Generated %d bridges and %d proxies",
            len(emittable),
            len(resolution.used_native_types),
        )
        return GenerationResult(units=units, diagnostics=diagnostics)

    def run(
        self,
        project_root: str | Path,
        output_dir: str | Path | None = None,
        *,
        native_api: Path | None = None,
        dry_run: bool = False,
    ) -> RunOutcome:
        """Scan a project on disk, generate, and write changed units."""
        root = Path(project_root).expanduser().resolve()
        target = Path(output_dir).expanduser() if output_dir is not None else root / DEFAULT_OUTPUT_DIR
        if not target.is_absolute():
            target = root / target
        self.logger.info("Starting generation for %s", root)

        config, config_diagnostic = load_config(root)
        if config_diagnostic is not None:
            log_diagnostic(self.logger, config_diagnostic)

        if native_api is not None:
            native_types = load_native_api(native_api)
        else:
            self.logger.debug("No native API description given; using the packaged class hierarchy")
            native_types = load_default_native_api()
        snapshot = self.scanner.scan(root, output_dir=target)
        catalog = TypeCatalog.build(native_types, scan_project_types(snapshot.csharp_sources))

        result = self.generate(snapshot.scripts, catalog, config)
        if config_diagnostic is not None:
            result.diagnostics.insert(0, config_diagnostic)

        outcome = RunOutcome(result=result, output_dir=target, dry_run=dry_run)
        self._write_units(root, outcome)
        return outcome

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_units(self, root: Path, outcome: RunOutcome) -> None:
        cache = OutputCache.for_project(root)
        target = outcome.output_dir
        previous = cache.output_dir
        # Units left in a previous output directory are all stale.
        moved = previous is not None and previous != target
        if moved:
            self.logger.info("Output directory changed from %s to %s", previous, target)
        filenames: List[str] = []
        for unit in outcome.result.units:
            filename = unit.filename
            filenames.append(filename)
            fingerprint = OutputCache.fingerprint(unit.text)
            path = target / filename
            if not moved and cache.is_current(filename, fingerprint) and path.exists():
                outcome.unchanged.append(filename)
                continue
            outcome.written.append(filename)
            if outcome.dry_run:
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(unit.text, encoding="utf-8")
            cache.store(filename, fingerprint)

        keep = set(filenames)
        stale = [key for key in cache.keys() if moved or key not in keep]
        stale_dir = previous if moved and previous is not None else target
        outcome.removed.extend(stale)
        if outcome.dry_run:
            self.logger.info(
                "Dry run: %d units would be written, %d removed",
                len(outcome.written),
                len(stale),
            )
            return

        for filename in stale:
            stale_path = stale_dir / filename
            if stale_path.exists():
                stale_path.unlink()
        cache.prune(filenames)
        cache.output_dir = target
        cache.persist()
        self.logger.info(
            "Wrote %d units to %s (%d unchanged, %d removed)",
            len(outcome.written),
            target,
            len(outcome.unchanged),
            len(stale),
        )

    def _map(self, func: Callable[[_T], _R], items: Sequence[_T]) -> List[_R]:
        if self.max_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(func, items))


__all__ = ["BridgeGenerator", "DEFAULT_OUTPUT_DIR", "RunOutcome"]
