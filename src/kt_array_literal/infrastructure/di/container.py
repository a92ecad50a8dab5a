from typing import TYPE_CHECKING, Any, cast

from kt_array_literal.domain.config import ConfigurationLoader
from kt_array_literal.domain.syntax import SyntaxTreeFactory
from kt_array_literal.infrastructure.config_file_loader import ConfigFileLoader
from kt_array_literal.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from kt_array_literal.infrastructure.gateways.scope_resolver import FileScopeResolver
from kt_array_literal.infrastructure.gateways.source_fixer_gateway import SourceFixerGateway
from kt_array_literal.infrastructure.gateways.tree_sitter_gateway import TreeSitterKotlinGateway
from kt_array_literal.infrastructure.reporters import TerminalInspectionReporter
from kt_array_literal.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from kt_array_literal.domain.protocols import (
        FileSystemProtocol,
        FixerGatewayProtocol,
        InspectionReporterProtocol,
        SemanticResolverProtocol,
        SourceParserProtocol,
        TelemetryPort,
        TreeFactoryProtocol,
    )


class KtArrayLiteralContainer:
    """Dependency Injection Container for the inspection CLI."""

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_dict)

    def _register_defaults(self, config_dict: dict[str, object] | None) -> None:
        """Register default implementations for protocols."""
        if config_dict is None:
            config_dict = ConfigFileLoader.load_config_from_fs()
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict))
        self.register_singleton("TelemetryPort", ProjectTelemetry("kt-array-literal", "cyan"))
        self.register_singleton("SourceParser", TreeSitterKotlinGateway())
        self.register_singleton("SemanticResolver", FileScopeResolver())
        self.register_singleton("TreeFactory", SyntaxTreeFactory())
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton("FixerGateway", SourceFixerGateway(filesystem))
        self.register_singleton("InspectionReporter", TerminalInspectionReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_source_parser(self) -> "SourceParserProtocol":
        return cast("SourceParserProtocol", self.get("SourceParser"))

    def get_semantic_resolver(self) -> "SemanticResolverProtocol":
        return cast("SemanticResolverProtocol", self.get("SemanticResolver"))

    def get_tree_factory(self) -> "TreeFactoryProtocol":
        return cast("TreeFactoryProtocol", self.get("TreeFactory"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        return cast("FixerGatewayProtocol", self.get("FixerGateway"))

    def get_reporter(self) -> "InspectionReporterProtocol":
        return cast("InspectionReporterProtocol", self.get("InspectionReporter"))
