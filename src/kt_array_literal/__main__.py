"""Package entry point - composition root. Wire dependencies and run the CLI app."""

import typer

from kt_array_literal.domain.errors import ConfigurationError
from kt_array_literal.infrastructure.di.container import KtArrayLiteralContainer
from kt_array_literal.interface.cli import CLIAppFactory, CLIDependencies


def build_dependencies(container: KtArrayLiteralContainer) -> CLIDependencies:
    return CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        parser=container.get_source_parser(),
        resolver=container.get_semantic_resolver(),
        factory=container.get_tree_factory(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
        reporter=container.get_reporter(),
    )


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    try:
        container = KtArrayLiteralContainer()
    except ConfigurationError as exc:
        typer.secho(f"Configuration error: {exc}", fg="red", err=True)
        raise SystemExit(2) from exc
    app = CLIAppFactory.create_app(build_dependencies(container))
    app()


if __name__ == "__main__":
    main()
