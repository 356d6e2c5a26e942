"""Module and package orchestration for generation runs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .chain.client import AptosClient
from .chain.source import source_map_for
from .codegen.classifier import AnnotationSettings, assign_argument_names, classify, placeholder_names
from .codegen.emitter import EmitterSettings, emit
from .codegen.names import recover_names
from .codegen.renderer import CodeRenderer
from .config import BlueprintConfig
from .errors import BlueprintError, ChainClientError
from .logging import function_logger, get_logger
from .models import FunctionAbi, GeneratedUnit, ModuleAbi
from .typetags.parser import parse_type_tag
from .typetags.tags import canonical_address
from .writer import OutputWriter

DEPRECATED_REFERENCE_PREFIX = "&0x"


@dataclass
class GenerationReport:
    """Summary of a generation run."""

    modules_emitted: int = 0
    functions_emitted: int = 0
    functions_failed: int = 0
    functions_skipped: int = 0
    failed_addresses: List[str] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)

    def record(self, unit: GeneratedUnit) -> None:
        if unit.functions:
            self.modules_emitted += 1
        self.functions_emitted += len(unit.functions)
        self.functions_failed += len(unit.failed)
        self.functions_skipped += len(unit.skipped)


class Orchestrator:
    """Fetches ABIs for addresses and turns every function into a payload builder."""

    def __init__(
        self,
        config: BlueprintConfig | None = None,
        *,
        client: AptosClient | None = None,
        renderer: CodeRenderer | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self.config = config or BlueprintConfig(root=Path.cwd())
        self.client = client or AptosClient(
            self.config.node_url,
            network=self.config.network,
            timeout=self.config.request_timeout,
        )
        self.renderer = renderer or CodeRenderer(self.config.templates_dir, sdk_path=self.config.sdk_path)
        self.writer = writer or OutputWriter(self.config.output_path, self.renderer)
        self.annotations = AnnotationSettings(
            named_addresses=self.config.named_addresses,
            named_type_tags=self.config.named_type_tags,
            expanded_structs=self.config.expanded_structs,
        )
        self.emitter_settings = EmitterSettings(
            function_comments=self.config.function_comments,
            include_account_params=self.config.include_account_params,
        )
        self.logger = get_logger("orchestrator")

    def generate(self, addresses: Iterable[str]) -> Dict[str, Dict[str, GeneratedUnit]]:
        """Generate code for every module at each address without writing files.

        Results are keyed by canonical address, then module name. Addresses
        whose ABIs cannot be fetched are logged and left out.
        """
        results: Dict[str, Dict[str, GeneratedUnit]] = {}
        for address, units in self._process(addresses, write=False, report=None):
            results[address] = _non_empty(units)
        return results

    def run(self, addresses: Iterable[str]) -> GenerationReport:
        """Generate code for `addresses` and write it to the configured output path."""
        report = GenerationReport()
        report.written.extend(self.writer.write_support_files())
        for _, units in self._process(addresses, write=True, report=report):
            for unit in units:
                report.record(unit)
        self.logger.info(
            "Generated %d functions in %d modules (%d failed, %d skipped)",
            report.functions_emitted,
            report.modules_emitted,
            report.functions_failed,
            report.functions_skipped,
        )
        return report

    def generate_address(self, address: str) -> Dict[str, GeneratedUnit]:
        return _non_empty(self._generate_address(canonical_address(address)))

    def generate_module(self, module: ModuleAbi, source: str | None = None) -> Optional[GeneratedUnit]:
        """Generate one module; None when no function in it could be emitted."""
        unit = self._generate_module(module, source)
        return unit if unit.functions else None

    def generate_function(self, module: ModuleAbi, function: FunctionAbi, source: str | None = None) -> str:
        type_tags = [parse_type_tag(param) for param in function.params]
        classified = classify(type_tags, function.generic_type_params, annotations=self.annotations)
        generic_clause = None
        if source is None:
            names = placeholder_names(len(type_tags))
        else:
            recovered = recover_names(function.name, source)
            names = recovered.argument_names
            generic_clause = recovered.generic_clause
        mapping = assign_argument_names(names, parameter_count=len(type_tags))
        return emit(
            function,
            module.name,
            classified,
            mapping,
            generic_clause=generic_clause,
            settings=self.emitter_settings,
            renderer=self.renderer,
        )

    def _process(
        self, addresses: Iterable[str], *, write: bool, report: GenerationReport | None
    ) -> List[Tuple[str, List[GeneratedUnit]]]:
        unique: List[str] = []
        for address in addresses:
            canonical = canonical_address(address)
            if canonical not in unique:
                unique.append(canonical)
        if not unique:
            return []

        outcomes: List[Tuple[str, List[GeneratedUnit]]] = []
        with ThreadPoolExecutor(
            max_workers=min(self.config.max_workers, len(unique)), thread_name_prefix="blueprint-address"
        ) as pool:
            futures = [(address, pool.submit(self._address_task, address, write)) for address in unique]
            for address, future in futures:
                try:
                    units, written = future.result()
                except (ChainClientError, BlueprintError) as exc:
                    self._log_exception(self.logger, f"Failed to process modules for {address}", exc)
                    if report is not None:
                        report.failed_addresses.append(address)
                    continue
                if report is not None:
                    report.written.extend(written)
                outcomes.append((address, units))
        return outcomes

    def _address_task(self, address: str, write: bool) -> Tuple[List[GeneratedUnit], List[Path]]:
        units = self._generate_address(address)
        written: List[Path] = []
        if write:
            written = self.writer.write_address(
                address, self.config.named_address_for(address), _non_empty(units)
            )
        return units, written

    def _generate_address(self, address: str) -> List[GeneratedUnit]:
        self.logger.info("Fetching module ABIs for %s", address)
        modules = self.client.get_account_modules(address)
        sources = source_map_for(self.client.get_package_registry(address))
        self.logger.debug("%s: %d modules, %d with source", address, len(modules), len(sources))
        if not modules:
            return []
        with ThreadPoolExecutor(
            max_workers=min(self.config.max_workers, len(modules)), thread_name_prefix="blueprint-module"
        ) as pool:
            futures = [pool.submit(self._generate_module, module, sources.get(module.name)) for module in modules]
            return [future.result() for future in futures]

    def _generate_module(self, module: ModuleAbi, source: str | None) -> GeneratedUnit:
        unit = GeneratedUnit(address=module.address, module_name=module.name, code="")
        if source is None:
            self.logger.debug("%s::%s has no published source; using positional names", module.address, module.name)
        entry_code: List[str] = []
        view_code: List[str] = []
        groups: Sequence[Tuple[List[FunctionAbi], List[str]]] = (
            (module.public_entry_functions, entry_code),
            (module.private_entry_functions, entry_code),
            (module.view_functions, view_code),
        )
        for functions, target in groups:
            for function in functions:
                log = function_logger(self.logger, address=module.address, module=module.name, function=function.name)
                try:
                    target.append(self.generate_function(module, function, source))
                except BlueprintError as exc:
                    deprecated = _deprecated_parameter(function)
                    if deprecated is not None:
                        log.info("Ignoring deprecated parameter %s", deprecated)
                        unit.skipped.append(function.name)
                    else:
                        self._log_exception(log, _failure_message(exc), exc)
                        unit.failed.append(function.name)
                    continue
                unit.functions.append(function.name)

        if not unit.functions:
            self.logger.debug("Skipping %s::%s: no functions emitted", module.address, module.name)
            return unit
        unit.code = self.renderer.render_module(
            entry_code,
            view_code,
            entry_namespace=self.config.entry_namespace,
            view_namespace=self.config.view_namespace,
        )
        return unit

    def _log_exception(self, logger: logging.Logger | logging.LoggerAdapter, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            logger.exception("%s: %s", message, exc)
        else:
            logger.error("%s: %s", message, exc)


def _deprecated_parameter(function: FunctionAbi) -> Optional[str]:
    return next((param for param in function.params if param.startswith(DEPRECATED_REFERENCE_PREFIX)), None)


def _failure_message(exc: BlueprintError) -> str:
    signature = getattr(exc, "signature", None)
    if signature:
        return f"Failed to generate (parameter {signature})"
    return "Failed to generate"


def _non_empty(units: Iterable[GeneratedUnit]) -> Dict[str, GeneratedUnit]:
    return {unit.module_name: unit for unit in units if unit.functions}


__all__ = ["GenerationReport", "Orchestrator"]
